"""
Models module - domain state types shared by services and schemas.

The relational tables are owned by the portal database; these enums are the
typed view of the flag columns the admin services read and write.
"""

from app.models.student import BulkAction, FreezeState, LockState, SelectionStatus

__all__ = ["BulkAction", "FreezeState", "LockState", "SelectionStatus"]
