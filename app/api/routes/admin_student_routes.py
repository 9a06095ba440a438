"""
Admin Student Routes

GET /admin/students - List active students of an academic year
PUT /admin/students/bulk-status - Freeze/unfreeze/lock/unlock many students
GET /admin/students/{userid}/eligibility - Can this profile be frozen now?
PUT /admin/students/{userid}/freeze - Freeze one profile (rules apply)
PUT /admin/students/{userid}/unfreeze - Unfreeze one profile
PUT /admin/students/{userid}/lock - Lock one profile
PUT /admin/students/{userid}/unlock - Unlock one profile
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from app.db.postgres import get_db_session
from app.core.auth import get_current_admin
from app.core.errors import DataAccessFault, NotFoundError, ValidationError
from app.models.student import BulkAction
from app.services.eligibility_service import EligibilityStatus, check_freeze_eligibility
from app.services import student_status_service
from app.schemas.schemas import (
    StudentListResponse, EligibilityResponse, BulkStatusRequest,
    BulkStatusResponse, MessageResponse
)

router = APIRouter(prefix="/admin/students", tags=["Admin Students"])


@router.get("", response_model=StudentListResponse)
async def list_students(
    year_id: int = Query(..., description="Academic year"),
    program_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None, description="Name or roll number"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=0, le=500, description="0 returns every row"),
    admin: dict = Depends(get_current_admin)
):
    """Active students of the year, ordered by roll number."""
    with get_db_session() as db:
        result = student_status_service.list_students(
            db, year_id=year_id, program_id=program_id, search=search, page=page, limit=limit
        )
    return result


@router.put("/bulk-status", response_model=BulkStatusResponse)
async def bulk_update_status(data: BulkStatusRequest, admin: dict = Depends(get_current_admin)):
    """
    Apply one action to many students.

    Freeze is partial: eligible students are frozen and the rest come back in
    `failures` with their reason. Other actions update every selected student.
    """
    try:
        with get_db_session() as db:
            report = student_status_service.apply_bulk_action(
                db, data.action, data.userids, admin["userid"]
            )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DataAccessFault as e:
        raise HTTPException(status_code=500, detail=e.message)

    return BulkStatusResponse(**report.to_dict())


@router.get("/{userid}/eligibility", response_model=EligibilityResponse)
async def get_freeze_eligibility(userid: int, admin: dict = Depends(get_current_admin)):
    """Check the freeze rules without changing anything."""
    with get_db_session() as db:
        result = check_freeze_eligibility(db, userid)

    if result.status is EligibilityStatus.not_found:
        raise HTTPException(status_code=404, detail=result.reason)

    return EligibilityResponse(userid=userid, **result.to_dict())


@router.put("/{userid}/freeze", response_model=MessageResponse)
async def freeze_student(userid: int, admin: dict = Depends(get_current_admin)):
    """Freeze a profile. Refused while placements are pending or internships are missing."""
    try:
        with get_db_session() as db:
            result = student_status_service.freeze_student(db, userid, admin["userid"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except DataAccessFault as e:
        raise HTTPException(status_code=500, detail=e.message)

    if result.status is EligibilityStatus.error:
        raise HTTPException(status_code=500, detail=result.reason)
    if not result.eligible:
        raise HTTPException(status_code=400, detail=f"Cannot freeze: {result.reason}")

    return MessageResponse(message="Student profile has been frozen.")


async def _set_state(userid: int, action: BulkAction, admin: dict, done: str) -> MessageResponse:
    try:
        with get_db_session() as db:
            student_status_service.set_profile_state(db, userid, action, admin["userid"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except DataAccessFault as e:
        raise HTTPException(status_code=500, detail=e.message)
    return MessageResponse(message=f"Student profile has been {done}.")


@router.put("/{userid}/unfreeze", response_model=MessageResponse)
async def unfreeze_student(userid: int, admin: dict = Depends(get_current_admin)):
    return await _set_state(userid, BulkAction.unfreeze, admin, "unfrozen")


@router.put("/{userid}/lock", response_model=MessageResponse)
async def lock_student(userid: int, admin: dict = Depends(get_current_admin)):
    return await _set_state(userid, BulkAction.lock, admin, "locked")


@router.put("/{userid}/unlock", response_model=MessageResponse)
async def unlock_student(userid: int, admin: dict = Depends(get_current_admin)):
    return await _set_state(userid, BulkAction.unlock, admin, "unlocked")
