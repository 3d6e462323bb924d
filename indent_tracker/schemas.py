from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Priority = Literal["High", "Medium", "Low"]
ApprovalStatus = Literal["Pending", "Approved", "Rejected"]
CompletionStatus = Literal["Pending", "Hold", "Terminate", "Completed"]
InspectionResult = Literal["Done", "Not Done"]


# ────────────────────────────── AUTH ──────────────────────────────

class PhoneRequest(BaseModel):
    phone: str

class OTPVerify(BaseModel):
    phone: str
    otp: str
    full_name: Optional[str] = None
    role: str = "staff"

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserOut(BaseModel):
    id: int
    phone: str
    full_name: Optional[str]
    role: str

    class Config:
        from_attributes = True


# ────────────────────────────── RECORDS ──────────────────────────────
# Frozen so a loaded snapshot cannot be mutated behind the resolver's back.

class IndentOut(BaseModel):
    id: int
    indent_no: str
    machine_name: str
    department: str
    problem: str
    priority: str
    expected_delivery_days: int
    image_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class ApprovalOut(BaseModel):
    id: int
    indent_id: int
    approval_status: str
    remarks: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class AssignmentOut(BaseModel):
    id: int
    indent_id: int
    technician_name: str
    phone_number: str
    assigned_date: date
    work_notes: Optional[str] = None
    assigned_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class TrackingOut(BaseModel):
    id: int
    indent_id: int
    additional_notes: Optional[str] = None
    completion_status: str
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class InspectionOut(BaseModel):
    id: int
    indent_id: int
    inspected_by: str
    inspection_date: date
    inspection_result: str
    remarks: Optional[str] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class PaymentOut(BaseModel):
    id: int
    indent_id: int
    bill_no: str
    total_bill_amount: float
    bill_image_url: Optional[str] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


# ────────────────────────────── STAGE WRITES ──────────────────────────────

class IndentCreate(BaseModel):
    machine_name: str = Field(min_length=1)
    department: str = Field(min_length=1)
    problem: str = Field(min_length=1)
    priority: Priority = "Medium"
    expected_delivery_days: int = Field(default=1, ge=1)
    image_url: Optional[str] = None


class ApprovalDecision(BaseModel):
    approval_status: Literal["Approved", "Rejected"]
    remarks: Optional[str] = None


class AssignmentCreate(BaseModel):
    technician_name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    assigned_date: date = Field(default_factory=date.today)
    work_notes: Optional[str] = None


class TrackingUpdate(BaseModel):
    additional_notes: Optional[str] = None
    completion_status: CompletionStatus = "Pending"


class InspectionCreate(BaseModel):
    inspected_by: str = Field(min_length=1)
    inspection_date: date = Field(default_factory=date.today)
    inspection_result: InspectionResult = "Done"
    remarks: Optional[str] = None


class PaymentCreate(BaseModel):
    bill_no: str = Field(min_length=1)
    total_bill_amount: float = Field(ge=0)
    bill_image_url: Optional[str] = None


# ────────────────────────────── VIEWS ──────────────────────────────

class IndentProgressOut(BaseModel):
    indent: IndentOut
    stage: str
    approval: Optional[ApprovalOut] = None
    assignment: Optional[AssignmentOut] = None
    tracking: Optional[TrackingOut] = None
    inspection: Optional[InspectionOut] = None
    payment: Optional[PaymentOut] = None


class QueueOut(BaseModel):
    tab: str
    count: int
    items: List[IndentProgressOut]


class UploadOut(BaseModel):
    path: str
    public_url: str


class DashboardStats(BaseModel):
    total_indents: int
    pending_approval: int
    approved: int
    rejected: int
    pending_assignment: int
    assigned: int
    work_pending: int
    work_completed: int
    pending_inspection: int
    inspected: int
    inspection_done: int
    inspection_not_done: int
    pending_payment: int
    payment_done: int
    high_priority: int
    medium_priority: int
    low_priority: int
    high_priority_pct: float
    medium_priority_pct: float
    low_priority_pct: float


class RecentActivity(BaseModel):
    id: int
    indent_no: str
    machine_name: str
    priority: str
    status: str
    created_at: datetime


class DashboardOut(BaseModel):
    stats: DashboardStats
    recent_activity: List[RecentActivity]
