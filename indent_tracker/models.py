from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from .database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(String, default="staff")  # staff / approver / technician


class Indent(Base):
    __tablename__ = "indents"
    id = Column(Integer, primary_key=True, index=True)
    indent_no = Column(String, unique=True, index=True, nullable=False)
    machine_name = Column(String, nullable=False)
    department = Column(String, nullable=False)
    problem = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="Medium")  # High / Medium / Low
    expected_delivery_days = Column(Integer, nullable=False, default=1)
    image_url = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


# Dependent tables: at most one row per indent, enforced by unique=True on indent_id.

class Approval(Base):
    __tablename__ = "approvals"
    id = Column(Integer, primary_key=True, index=True)
    indent_id = Column(Integer, ForeignKey("indents.id"), unique=True, index=True, nullable=False)
    approval_status = Column(String, nullable=False, default="Pending")  # Pending / Approved / Rejected
    remarks = Column(Text, nullable=True)
    approved_by = Column(String, nullable=True)
    approved_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class TechnicianAssignment(Base):
    __tablename__ = "technician_assignments"
    id = Column(Integer, primary_key=True, index=True)
    indent_id = Column(Integer, ForeignKey("indents.id"), unique=True, index=True, nullable=False)
    technician_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    assigned_date = Column(Date, nullable=False)
    work_notes = Column(Text, nullable=True)
    assigned_by = Column(String, nullable=True)


class WorkTracking(Base):
    __tablename__ = "work_tracking"
    id = Column(Integer, primary_key=True, index=True)
    indent_id = Column(Integer, ForeignKey("indents.id"), unique=True, index=True, nullable=False)
    additional_notes = Column(Text, nullable=True)
    completion_status = Column(String, nullable=False, default="Pending")  # Pending / Hold / Terminate / Completed
    updated_by = Column(String, nullable=True)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class Inspection(Base):
    __tablename__ = "inspections"
    id = Column(Integer, primary_key=True, index=True)
    indent_id = Column(Integer, ForeignKey("indents.id"), unique=True, index=True, nullable=False)
    inspected_by = Column(String, nullable=False)
    inspection_date = Column(Date, nullable=False)
    inspection_result = Column(String, nullable=False, default="Done")  # Done / Not Done
    remarks = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Integer, primary_key=True, index=True)
    indent_id = Column(Integer, ForeignKey("indents.id"), unique=True, index=True, nullable=False)
    bill_no = Column(String, nullable=False)
    total_bill_amount = Column(Float, nullable=False)
    bill_image_url = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
