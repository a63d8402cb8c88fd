"""
User Endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_user_directory
from app.schemas.user import UserCreate, UserResponse
from app.services.user_service import UserAlreadyExistsError, UserDirectory

router = APIRouter()


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_in: UserCreate,
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Register a citizen, NGO or authority user

    The role chosen here is permanent.
    """
    try:
        user = users.register(
            name=user_in.name,
            email=user_in.email,
            role=user_in.role,
            phone=user_in.phone,
            avatar=user_in.avatar
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    users: UserDirectory = Depends(get_user_directory)
):
    """
    User profile
    """
    user = users.get(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return UserResponse.model_validate(user)
