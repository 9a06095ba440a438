"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Domain state types (flag enums)
- Schemas: API contract (what client sends/receives)
"""

from app.schemas.schemas import (
    BulkStatusRequest,
    BulkStatusResponse,
    EligibilityResponse,
    MessageResponse,
    StudentListResponse,
)

__all__ = [
    "BulkStatusRequest",
    "BulkStatusResponse",
    "EligibilityResponse",
    "MessageResponse",
    "StudentListResponse",
]
