"""
Freeze Eligibility Service

A student profile may be frozen only when:
1. No placement application of theirs is still Pending
2. Every internship requirement of their program is met: for each
   (semester, internship_count) row, the student has at least that many
   internship records in that semester

The check is a total function. Store faults are logged and turned into an
ineligible result so a bulk freeze can always report on every student.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.student import SelectionStatus

logger = logging.getLogger(__name__)

NOT_FOUND_REASON = "Student profile not found."
VALIDATION_ERROR_REASON = "Validation error: eligibility could not be checked."


class EligibilityStatus(str, Enum):
    eligible = "eligible"
    rule_failure = "rule_failure"
    not_found = "not_found"
    error = "error"


@dataclass(frozen=True)
class EligibilityResult:
    status: EligibilityStatus
    reason: Optional[str] = None

    @property
    def eligible(self) -> bool:
        return self.status is EligibilityStatus.eligible

    @classmethod
    def ok(cls) -> "EligibilityResult":
        return cls(EligibilityStatus.eligible)

    @classmethod
    def denied(cls, reason: str) -> "EligibilityResult":
        return cls(EligibilityStatus.rule_failure, reason)

    def to_dict(self) -> dict:
        return {"eligible": self.eligible, "status": self.status.value, "reason": self.reason}


def count_pending_applications(db: Session, student_id: int) -> int:
    row = db.execute(
        text("""
            SELECT COUNT(*) FROM student_placement
            WHERE user_id = :id AND is_selected = :pending
        """),
        {"id": student_id, "pending": SelectionStatus.pending.db_value}
    ).fetchone()
    return int(row[0] or 0)


def get_program_id(db: Session, student_id: int) -> Optional[int]:
    row = db.execute(
        text("SELECT program_id FROM student_master WHERE userid = :id"),
        {"id": student_id}
    ).fetchone()
    return row[0] if row else None


def get_internship_requirements(db: Session, program_id: int) -> list:
    """(semester, required count) rows, ascending semester for stable messages."""
    rows = db.execute(
        text("""
            SELECT semester, internship_count FROM internship_requirement
            WHERE program_id = :pid ORDER BY semester
        """),
        {"pid": program_id}
    ).fetchall()
    return [(r[0], int(r[1] or 0)) for r in rows]


def get_completed_internships(db: Session, student_id: int) -> dict:
    """semester -> number of internship records. Missing semesters mean 0."""
    rows = db.execute(
        text("""
            SELECT semester, COUNT(*) FROM student_internship
            WHERE user_id = :id GROUP BY semester
        """),
        {"id": student_id}
    ).fetchall()
    return {r[0]: int(r[1]) for r in rows}


def _evaluate(db: Session, student_id: int) -> EligibilityResult:
    pending = count_pending_applications(db, student_id)
    if pending > 0:
        return EligibilityResult.denied(f"Has {pending} pending placement application(s).")

    program_id = get_program_id(db, student_id)
    if program_id is None:
        return EligibilityResult(EligibilityStatus.not_found, NOT_FOUND_REASON)

    requirements = get_internship_requirements(db, program_id)
    if not requirements:
        return EligibilityResult.ok()

    completed = get_completed_internships(db, student_id)

    # First shortfall wins, one semester per message
    for semester, required in requirements:
        done = completed.get(semester, 0)
        if done < required:
            return EligibilityResult.denied(
                f"Missing {required - done} internship(s) for Semester {semester}."
            )

    return EligibilityResult.ok()


def check_freeze_eligibility(db: Session, student_id: int) -> EligibilityResult:
    """
    Decide whether the student's profile may be frozen right now.

    Never raises for store errors: they come back as status `error` with a
    generic reason. The checks only read, so rolling back is safe.
    """
    try:
        result = _evaluate(db, student_id)
    except SQLAlchemyError:
        logger.exception("Eligibility check failed for student %s", student_id)
        db.rollback()
        return EligibilityResult(EligibilityStatus.error, VALIDATION_ERROR_REASON)

    if not result.eligible:
        logger.info("Student %s not eligible to freeze: %s", student_id, result.reason)
    return result
