"""
Reference Data Routes

GET /academic-years - Academic years, newest first
GET /academic-sessions - Sessions with their academic year
GET /company-types - Company types, newest first
GET /departments - Departments, newest first
GET /rejected-students - Rejected student accounts, latest change first
"""

from fastapi import APIRouter, Depends
from typing import List

from app.db.postgres import get_db_session
from app.core.auth import get_current_admin
from app.services import report_service
from app.schemas.schemas import (
    AcademicYearResponse, AcademicSessionResponse, CompanyTypeResponse,
    DepartmentResponse, RejectedStudentResponse
)

router = APIRouter(tags=["Reference Data"])


@router.get("/academic-years", response_model=List[AcademicYearResponse])
async def get_academic_years(admin: dict = Depends(get_current_admin)):
    with get_db_session() as db:
        return report_service.list_academic_years(db)


@router.get("/academic-sessions", response_model=List[AcademicSessionResponse])
async def get_academic_sessions(admin: dict = Depends(get_current_admin)):
    with get_db_session() as db:
        return report_service.list_academic_sessions(db)


@router.get("/company-types", response_model=List[CompanyTypeResponse])
async def get_company_types(admin: dict = Depends(get_current_admin)):
    with get_db_session() as db:
        return report_service.list_company_types(db)


@router.get("/departments", response_model=List[DepartmentResponse])
async def get_departments(admin: dict = Depends(get_current_admin)):
    with get_db_session() as db:
        return report_service.list_departments(db)


@router.get("/rejected-students", response_model=List[RejectedStudentResponse])
async def get_rejected_students(admin: dict = Depends(get_current_admin)):
    with get_db_session() as db:
        return report_service.list_rejected_students(db)
