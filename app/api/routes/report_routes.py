"""
Report Routes (admin only, academic year required)

GET /reports/student-placement-stats - Applications/selections per student
GET /reports/placement-drive-stats - Applications/selections per drive
GET /reports/selected-students - Selected students with offer details
GET /reports/student-internship-report - Internship count per student per semester
GET /reports/expenditure-report - Expenses per session, latest change first
"""

import logging

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_admin
from app.services import report_service
from app.schemas.schemas import (
    StudentPlacementStatsRow, PlacementDriveStatsRow,
    SelectedStudentRow, StudentInternshipRow, ExpenditureRow
)

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = logging.getLogger(__name__)


def _run_report(report, year_id: Optional[int], **filters) -> list:
    if year_id is None:
        raise HTTPException(status_code=400, detail="Academic Year (year_id) is required.")
    try:
        with get_db_session() as db:
            return report(db, year_id, **filters)
    except SQLAlchemyError:
        logger.exception("Report %s failed", report.__name__)
        raise HTTPException(status_code=500, detail="Database query error")


@router.get("/student-placement-stats", response_model=List[StudentPlacementStatsRow])
async def student_placement_stats(
    year_id: Optional[int] = Query(None),
    student_name: Optional[str] = Query(None),
    rollno: Optional[str] = Query(None),
    program_name: Optional[str] = Query(None),
    session_name: Optional[str] = Query(None),
    count_apply: Optional[str] = Query(None),
    count_selected: Optional[str] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    return _run_report(
        report_service.student_placement_stats, year_id,
        student_name=student_name, rollno=rollno, program_name=program_name,
        session_name=session_name, count_apply=count_apply, count_selected=count_selected
    )


@router.get("/placement-drive-stats", response_model=List[PlacementDriveStatsRow])
async def placement_drive_stats(
    year_id: Optional[int] = Query(None),
    is_active: Optional[str] = Query(None, description="all, 1 (active) or 0 (closed)"),
    drive_name: Optional[str] = Query(None),
    company_name: Optional[str] = Query(None),
    ctc: Optional[str] = Query(None),
    count_apply: Optional[str] = Query(None),
    count_selected: Optional[str] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    return _run_report(
        report_service.placement_drive_stats, year_id,
        is_active=is_active, drive_name=drive_name, company_name=company_name,
        ctc=ctc, count_apply=count_apply, count_selected=count_selected
    )


@router.get("/selected-students", response_model=List[SelectedStudentRow])
async def selected_students(
    year_id: Optional[int] = Query(None),
    student_name: Optional[str] = Query(None),
    rollno: Optional[str] = Query(None),
    program_name: Optional[str] = Query(None),
    drive_name: Optional[str] = Query(None),
    company_name: Optional[str] = Query(None),
    company_type: Optional[str] = Query(None),
    ctc: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    place: Optional[str] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    return _run_report(
        report_service.selected_students, year_id,
        student_name=student_name, rollno=rollno, program_name=program_name,
        drive_name=drive_name, company_name=company_name, company_type=company_type,
        ctc=ctc, role=role, place=place
    )


@router.get("/student-internship-report", response_model=List[StudentInternshipRow])
async def student_internship_report(
    year_id: Optional[int] = Query(None),
    student_name: Optional[str] = Query(None),
    rollno: Optional[str] = Query(None),
    program_name: Optional[str] = Query(None),
    session_name: Optional[str] = Query(None),
    semester: Optional[str] = Query(None, description="Prefix, or n/a for students without internships"),
    internship_count: Optional[str] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    return _run_report(
        report_service.student_internship_report, year_id,
        student_name=student_name, rollno=rollno, program_name=program_name,
        session_name=session_name, semester=semester, internship_count=internship_count
    )


@router.get("/expenditure-report", response_model=List[ExpenditureRow])
async def expenditure_report(
    year_id: Optional[int] = Query(None),
    expense_on: Optional[str] = Query(None),
    session_name: Optional[str] = Query(None),
    amount: Optional[str] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    return _run_report(
        report_service.expenditure_report, year_id,
        expense_on=expense_on, session_name=session_name, amount=amount
    )
