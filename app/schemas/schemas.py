"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime

from app.models.student import FreezeState, LockState


# ============================================================
# ADMIN STUDENT SCHEMAS
# ============================================================

class StudentListItem(BaseModel):
    userid: int
    rollno: Optional[str] = None
    name: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None
    session_name: Optional[str] = None
    program_name: Optional[str] = None
    is_profile_frozen: FreezeState
    is_profile_locked: LockState
    mod_time: Optional[datetime] = None
    modified_by: Optional[str] = None

class StudentListResponse(BaseModel):
    data: List[StudentListItem]
    total: int

class EligibilityResponse(BaseModel):
    userid: int
    eligible: bool
    status: str
    reason: Optional[str] = None

class BulkStatusRequest(BaseModel):
    # action stays a plain string so an unknown value is reported by name
    userids: List[int] = Field(default_factory=list)
    action: str

class FreezeFailureResponse(BaseModel):
    userid: int
    rollno: str
    name: str
    reason: str

class BulkStatusResponse(BaseModel):
    action: str
    message: str
    requested: int
    success_count: int
    failure_count: int
    failures: List[FreezeFailureResponse] = []


# ============================================================
# REFERENCE DATA SCHEMAS
# ============================================================

class AcademicYearResponse(BaseModel):
    year_id: int
    year_name: str
    mod_time: Optional[datetime] = None
    modified_by: Optional[str] = None

class AcademicSessionResponse(BaseModel):
    session_id: int
    session_name: str
    year_name: str
    mod_time: Optional[datetime] = None
    modified_by: Optional[str] = None

class CompanyTypeResponse(BaseModel):
    type_id: int
    type_name: str
    mod_time: Optional[datetime] = None
    modified_by: Optional[str] = None

class DepartmentResponse(BaseModel):
    department_id: int
    department_name: str
    mod_time: Optional[datetime] = None
    modified_by: Optional[str] = None

class RejectedStudentResponse(BaseModel):
    userid: int
    name: Optional[str] = None
    rollno: Optional[str] = None
    mobile: Optional[str] = None
    username: str
    user_type: str
    mod_time: Optional[datetime] = None
    modified_by: Optional[str] = None


# ============================================================
# REPORT SCHEMAS
# ============================================================

class StudentPlacementStatsRow(BaseModel):
    student_name: str
    rollno: Optional[str] = None
    program_name: str
    session_name: str
    count_apply: int
    count_selected: int = 0

class PlacementDriveStatsRow(BaseModel):
    drive_id: int
    drive_name: str
    company_name: str
    ctc: Optional[float] = None
    description: Optional[str] = None
    is_active: Optional[Any] = None
    count_apply: int
    count_selected: int = 0

class SelectedStudentRow(BaseModel):
    student_name: str
    rollno: Optional[str] = None
    program_name: str
    drive_name: str
    company_name: str
    company_type: str
    ctc: Optional[float] = None
    role: Optional[str] = None
    place: Optional[str] = None

class StudentInternshipRow(BaseModel):
    userid: int
    student_name: str
    rollno: Optional[str] = None
    program_name: str
    semester: Optional[int] = None
    internship_session: Optional[str] = None
    internship_count: int

class ExpenditureRow(BaseModel):
    expenditure_id: int
    expense_on: str
    session_name: str
    amount: Optional[float] = None
    bill_file_path: Optional[str] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
