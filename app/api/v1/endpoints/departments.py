"""
Department Endpoints - department routing and worker directory
"""
from typing import List
from fastapi import APIRouter

from app.models.issue import IssueCategory
from app.schemas.issue import DepartmentResponse, WorkerResponse
from app.services.issue_ai_service import issue_ai_service
from app.services import worker_directory

router = APIRouter()


@router.get("/", response_model=List[DepartmentResponse])
async def list_departments():
    """
    Department responsible for each issue category
    """
    departments = []
    for category in IssueCategory:
        department = issue_ai_service.get_department(category)
        departments.append(DepartmentResponse(
            category=category,
            department=department,
            worker_count=len(worker_directory.get_available_workers(department))
        ))
    return departments


@router.get("/{department}/workers", response_model=List[WorkerResponse])
async def list_department_workers(department: str):
    """
    Workers available for assignment; unknown departments have none
    """
    return [
        WorkerResponse.model_validate(worker)
        for worker in worker_directory.get_available_workers(department)
    ]
