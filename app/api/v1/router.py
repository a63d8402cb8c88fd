"""
API v1 Main Router
"""
from fastapi import APIRouter

from app.api.v1.endpoints import (
    issues,
    departments,
    users
)

api_router = APIRouter()

# Issues (citizens and departments)
api_router.include_router(
    issues.router,
    prefix="/issues",
    tags=["Issues"]
)

# Department routing and workers
api_router.include_router(
    departments.router,
    prefix="/departments",
    tags=["Departments"]
)

# Users
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"]
)
