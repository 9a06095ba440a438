"""
Student profile state types.

The store keeps these as "Yes"/"No"/"Pending" strings. Code outside the
persistence edge only sees the enums; `db_value` and `from_db` are the only
conversions.
"""

from enum import Enum


class FreezeState(str, Enum):
    frozen = "frozen"
    unfrozen = "unfrozen"

    @property
    def db_value(self) -> str:
        return "Yes" if self is FreezeState.frozen else "No"

    @classmethod
    def from_db(cls, value) -> "FreezeState":
        return cls.frozen if value == "Yes" else cls.unfrozen


class LockState(str, Enum):
    locked = "locked"
    unlocked = "unlocked"

    @property
    def db_value(self) -> str:
        return "Yes" if self is LockState.locked else "No"

    @classmethod
    def from_db(cls, value) -> "LockState":
        return cls.locked if value == "Yes" else cls.unlocked


class SelectionStatus(str, Enum):
    """Outcome of a placement application."""
    pending = "pending"
    selected = "selected"
    rejected = "rejected"

    @property
    def db_value(self) -> str:
        return _SELECTION_TO_DB[self]

    @classmethod
    def from_db(cls, value) -> "SelectionStatus":
        for status, stored in _SELECTION_TO_DB.items():
            if stored == value:
                return status
        raise ValueError(f"Unknown selection status {value!r}")


_SELECTION_TO_DB = {
    SelectionStatus.pending: "Pending",
    SelectionStatus.selected: "Yes",
    SelectionStatus.rejected: "No",
}


class BulkAction(str, Enum):
    freeze = "freeze"
    unfreeze = "unfreeze"
    lock = "lock"
    unlock = "unlock"

    @property
    def column(self) -> str:
        """student_master column this action writes."""
        if self in (BulkAction.freeze, BulkAction.unfreeze):
            return "is_profile_frozen"
        return "is_profile_locked"

    @property
    def target_value(self) -> str:
        """Stored value the column is set to."""
        return {
            BulkAction.freeze: FreezeState.frozen.db_value,
            BulkAction.unfreeze: FreezeState.unfrozen.db_value,
            BulkAction.lock: LockState.locked.db_value,
            BulkAction.unlock: LockState.unlocked.db_value,
        }[self]
