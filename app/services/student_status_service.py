"""
Student Profile Status Service

Freeze / unfreeze / lock / unlock for one student or a batch.

Each call runs in three stages:
1. read   - eligibility checks (freeze only), no side effects
2. decide - split ids into accepted and rejected
3. write  - one UPDATE for the accepted ids, stamped with the acting admin

Bulk freeze is partial-success: eligible students are frozen, the others are
returned with their reason. The other actions have no precondition and update
the whole selection in one statement.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Iterable, List, Optional, Union

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DataAccessFault, NotFoundError, ValidationError
from app.db.query_builder import Predicates
from app.models.student import BulkAction, FreezeState, LockState
from app.services.eligibility_service import (
    EligibilityResult,
    EligibilityStatus,
    check_freeze_eligibility,
)

logger = logging.getLogger(__name__)


@dataclass
class FreezeFailure:
    userid: int
    rollno: str
    name: str
    reason: str


@dataclass
class BulkActionReport:
    action: BulkAction
    requested: int
    success_count: int
    failures: List[FreezeFailure] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def message(self) -> str:
        if self.action is BulkAction.freeze:
            return (
                f"Processed: {self.success_count} frozen, "
                f"{self.failure_count} skipped due to requirements."
            )
        return f"Bulk {self.action.value} successful for {self.success_count} student(s)."

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "message": self.message,
            "requested": self.requested,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "failures": [asdict(f) for f in self.failures],
        }


# ============================================================
# INPUT VALIDATION
# ============================================================

def parse_action(action: Union[str, BulkAction]) -> BulkAction:
    try:
        return BulkAction(action)
    except ValueError:
        raise ValidationError(f"Invalid action '{action}'.") from None


def _unique_ids(student_ids: Optional[Iterable[int]]) -> List[int]:
    # Keeps first-seen order so reports list students as selected
    return list(dict.fromkeys(student_ids or []))


# ============================================================
# WRITE PHASE
# ============================================================

def _update_flags(db: Session, action: BulkAction, student_ids: List[int], admin_id: int) -> int:
    """Single UPDATE over all ids. Returns the number of rows changed."""
    stmt = text(f"""
        UPDATE student_master
        SET {action.column} = :value, mod_by = :mod_by, mod_time = CURRENT_TIMESTAMP
        WHERE userid IN :ids
    """).bindparams(bindparam("ids", expanding=True))

    try:
        result = db.execute(stmt, {"value": action.target_value, "mod_by": admin_id, "ids": student_ids})
    except SQLAlchemyError as e:
        logger.error("Bulk %s failed for %d student(s): %s", action.value, len(student_ids), e)
        raise DataAccessFault("Bulk update failed.", cause=e) from e

    logger.info(
        "Admin %s applied %s to %d student(s)", admin_id, action.value, result.rowcount
    )
    return result.rowcount


def _display_identity(db: Session, student_id: int) -> tuple:
    try:
        row = db.execute(
            text("SELECT rollno, name FROM student_master WHERE userid = :id"),
            {"id": student_id}
        ).fetchone()
    except SQLAlchemyError as e:
        raise DataAccessFault("Could not load student details.", cause=e) from e
    if not row:
        return "N/A", "Unknown"
    return row[0] or "N/A", row[1] or "Unknown"


# ============================================================
# BULK
# ============================================================

def apply_bulk_action(
    db: Session,
    action: Union[str, BulkAction],
    student_ids: Iterable[int],
    admin_id: int,
) -> BulkActionReport:
    """
    Apply one action to a selection of students.

    Raises ValidationError for an empty selection or unknown action (nothing
    is written), DataAccessFault when the store fails outside the
    eligibility checks.
    """
    ids = _unique_ids(student_ids)
    if not ids:
        raise ValidationError("No students selected.")
    bulk_action = parse_action(action)

    if bulk_action is not BulkAction.freeze:
        changed = _update_flags(db, bulk_action, ids, admin_id)
        return BulkActionReport(action=bulk_action, requested=len(ids), success_count=changed)

    accepted: List[int] = []
    failures: List[FreezeFailure] = []

    for student_id in ids:
        check = check_freeze_eligibility(db, student_id)
        if check.eligible:
            accepted.append(student_id)
            continue
        rollno, name = _display_identity(db, student_id)
        failures.append(FreezeFailure(userid=student_id, rollno=rollno, name=name, reason=check.reason))

    if accepted:
        _update_flags(db, bulk_action, accepted, admin_id)
    if failures:
        logger.warning("Bulk freeze skipped %d of %d student(s)", len(failures), len(ids))

    return BulkActionReport(
        action=bulk_action,
        requested=len(ids),
        success_count=len(accepted),
        failures=failures,
    )


# ============================================================
# SINGLE STUDENT
# ============================================================

def freeze_student(db: Session, student_id: int, admin_id: int) -> EligibilityResult:
    """
    Freeze one profile if it passes the eligibility rules.

    Returns the eligibility result; the profile is only written when it is
    eligible. Raises NotFoundError for an unknown student.
    """
    check = check_freeze_eligibility(db, student_id)
    if check.status is EligibilityStatus.not_found:
        raise NotFoundError("Student not found.")
    if check.eligible:
        _update_flags(db, BulkAction.freeze, [student_id], admin_id)
    return check


def set_profile_state(db: Session, student_id: int, action: Union[str, BulkAction], admin_id: int) -> None:
    """Unconditional unfreeze / lock / unlock of one profile."""
    bulk_action = parse_action(action)
    if bulk_action is BulkAction.freeze:
        raise ValidationError("Use freeze_student to freeze a profile.")
    if _update_flags(db, bulk_action, [student_id], admin_id) == 0:
        raise NotFoundError("Student not found.")


# ============================================================
# LISTING
# ============================================================

def list_students(
    db: Session,
    year_id: int,
    program_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    """Active students of an academic year, paginated. limit=0 returns all."""
    where = Predicates("w").raw("u.is_enable = '1'").equals("ss.year_id", year_id)
    where.equals("s.program_id", program_id)
    where.any_contains(["s.name", "s.rollno"], search)

    base = f"""
        FROM student_master AS s
        JOIN session_master AS ss ON s.session_id = ss.session_id
        JOIN program_master AS p ON s.program_id = p.program_id
        JOIN user_master AS u ON s.userid = u.userid
        LEFT JOIN user_master AS um ON s.mod_by = um.userid
        {where.sql("WHERE")}
    """
    params = dict(where.params)

    total = db.execute(text(f"SELECT COUNT(*) {base}"), params).fetchone()[0]
    if not total:
        return {"data": [], "total": 0}

    sql = f"""
        SELECT s.userid, s.rollno, s.name, s.mobile, s.email,
               ss.session_name, p.program_name,
               s.is_profile_frozen, s.is_profile_locked, s.mod_time,
               um.username AS modified_by
        {base}
        ORDER BY LENGTH(s.rollno), s.rollno
    """
    if limit:
        page = max(page, 1)
        sql += " LIMIT :limit OFFSET :offset"
        params.update({"limit": limit, "offset": (page - 1) * limit})

    rows = db.execute(text(sql), params).mappings().all()
    data = []
    for r in rows:
        item = dict(r)
        item["is_profile_frozen"] = FreezeState.from_db(r["is_profile_frozen"])
        item["is_profile_locked"] = LockState.from_db(r["is_profile_locked"])
        data.append(item)
    return {"data": data, "total": total}
