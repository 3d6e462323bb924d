# indent_tracker/workflow.py
"""
Workflow state resolution for indents.

Every function here is pure: it takes a WorkflowSnapshot (the six
collections, already fetched) and derives stages, queue splits and
dashboard counts from which dependent rows exist and what their status
fields say. Nothing is cached and nothing is written.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

# ────────────────────────────── LABELS ──────────────────────────────

PENDING_APPROVAL = "Pending Approval"
APPROVED = "Approved"
REJECTED = "Rejected"
IN_PROGRESS = "In Progress"
WORK_COMPLETED = "Work Completed"
INSPECTED = "Inspected"
PAYMENT_DONE = "Payment Done"

STAGES = (
    PENDING_APPROVAL,
    APPROVED,
    REJECTED,
    IN_PROGRESS,
    WORK_COMPLETED,
    INSPECTED,
    PAYMENT_DONE,
)

PRIORITIES = ("High", "Medium", "Low")

# Stage-advancing actions, in workflow order.
APPROVE = "approve"
ASSIGN = "assign"
TRACK = "track"
INSPECT = "inspect"
PAY = "pay"


# ────────────────────────────── SNAPSHOT ──────────────────────────────

@dataclass(frozen=True)
class WorkflowSnapshot:
    """The six collections as fetched. Indents are expected newest first."""

    indents: Tuple[Any, ...] = ()
    approvals: Tuple[Any, ...] = ()
    assignments: Tuple[Any, ...] = ()
    tracking: Tuple[Any, ...] = ()
    inspections: Tuple[Any, ...] = ()
    payments: Tuple[Any, ...] = ()

    @classmethod
    def of(cls, indents=(), approvals=(), assignments=(), tracking=(),
           inspections=(), payments=()):
        return cls(
            indents=tuple(indents),
            approvals=tuple(approvals),
            assignments=tuple(assignments),
            tracking=tuple(tracking),
            inspections=tuple(inspections),
            payments=tuple(payments),
        )


@dataclass(frozen=True)
class IndentProgress:
    indent: Any
    approval: Optional[Any] = None
    assignment: Optional[Any] = None
    tracking: Optional[Any] = None
    inspection: Optional[Any] = None
    payment: Optional[Any] = None

    @property
    def stage(self) -> str:
        return resolve_stage(self)


@dataclass(frozen=True)
class WorkflowSummary:
    total_indents: int = 0
    pending_approval: int = 0
    approved: int = 0
    rejected: int = 0
    pending_assignment: int = 0
    assigned: int = 0
    work_pending: int = 0
    work_completed: int = 0
    pending_inspection: int = 0
    inspected: int = 0
    inspection_done: int = 0
    inspection_not_done: int = 0
    pending_payment: int = 0
    payment_done: int = 0
    priority_counts: Dict[str, int] = field(default_factory=dict)
    priority_pct: Dict[str, float] = field(default_factory=dict)


# ────────────────────────────── JOINS ──────────────────────────────

def _first_by_indent(rows: Iterable[Any]) -> Dict[Any, Any]:
    # First row wins, so duplicates resolve the same way a linear find would.
    index: Dict[Any, Any] = {}
    for row in rows:
        index.setdefault(row.indent_id, row)
    return index


def _status(row: Optional[Any], attr: str) -> Optional[str]:
    return getattr(row, attr) if row is not None else None


class _Joined:
    """Per-table indent_id lookups, built once per snapshot."""

    def __init__(self, snapshot: WorkflowSnapshot):
        self.approvals = _first_by_indent(snapshot.approvals)
        self.assignments = _first_by_indent(snapshot.assignments)
        self.tracking = _first_by_indent(snapshot.tracking)
        self.inspections = _first_by_indent(snapshot.inspections)
        self.payments = _first_by_indent(snapshot.payments)

    def progress(self, indent) -> IndentProgress:
        return IndentProgress(
            indent=indent,
            approval=self.approvals.get(indent.id),
            assignment=self.assignments.get(indent.id),
            tracking=self.tracking.get(indent.id),
            inspection=self.inspections.get(indent.id),
            payment=self.payments.get(indent.id),
        )


def progress_for(snapshot: WorkflowSnapshot, indent) -> IndentProgress:
    return _Joined(snapshot).progress(indent)


def all_progress(snapshot: WorkflowSnapshot) -> List[IndentProgress]:
    joined = _Joined(snapshot)
    return [joined.progress(indent) for indent in snapshot.indents]


# ────────────────────────────── STAGE ──────────────────────────────

def resolve_stage(progress: IndentProgress) -> str:
    """Return the single current stage label for one indent.

    Checked latest stage first and the first match wins. A downstream row
    is taken at face value: a payment means "Payment Done" whatever the
    upstream rows say.
    """
    if progress.payment is not None:
        return PAYMENT_DONE
    if progress.inspection is not None:
        return INSPECTED
    if _status(progress.tracking, "completion_status") == "Completed":
        return WORK_COMPLETED
    if progress.assignment is not None:
        return IN_PROGRESS
    approval_status = _status(progress.approval, "approval_status")
    if approval_status == "Approved":
        return APPROVED
    if approval_status == "Rejected":
        return REJECTED
    return PENDING_APPROVAL


def resolve_stages(snapshot: WorkflowSnapshot) -> Dict[Any, str]:
    return {p.indent.id: resolve_stage(p) for p in all_progress(snapshot)}


def allowed_actions(progress: IndentProgress) -> FrozenSet[str]:
    """Stage-advancing actions that may be offered for this indent."""
    actions = set()
    tracking_status = _status(progress.tracking, "completion_status")
    if progress.assignment is None:
        actions.add(APPROVE)
    if (_status(progress.approval, "approval_status") == "Approved"
            and progress.tracking is None):
        actions.add(ASSIGN)
    if progress.assignment is not None and progress.inspection is None:
        actions.add(TRACK)
    if tracking_status == "Completed" and progress.payment is None:
        actions.add(INSPECT)
    if (_status(progress.inspection, "inspection_result") == "Done"
            and progress.payment is None):
        actions.add(PAY)
    return frozenset(actions)


# ────────────────────────────── SETS ──────────────────────────────
# Membership mirrors the per-page filters: some are sets of indents,
# some are sets of dependent rows, some are indent ids taken from rows.

def pending_approval(snapshot: WorkflowSnapshot) -> List[Any]:
    """Indents with no approval row, or one still marked Pending."""
    decided = {
        a.indent_id for a in snapshot.approvals if a.approval_status != "Pending"
    }
    return [i for i in snapshot.indents if i.id not in decided]


def approved(snapshot: WorkflowSnapshot) -> List[Any]:
    return [a for a in snapshot.approvals if a.approval_status == "Approved"]


def rejected(snapshot: WorkflowSnapshot) -> List[Any]:
    return [a for a in snapshot.approvals if a.approval_status == "Rejected"]


def pending_assignment(snapshot: WorkflowSnapshot) -> List[Any]:
    """Approved indent ids with no assignment row."""
    assigned_ids = {a.indent_id for a in snapshot.assignments}
    return [a.indent_id for a in approved(snapshot) if a.indent_id not in assigned_ids]


def pending_work(snapshot: WorkflowSnapshot) -> List[Any]:
    """Assigned indent ids whose tracking row is absent or Pending."""
    tracking = _first_by_indent(snapshot.tracking)
    pending = []
    for assignment in snapshot.assignments:
        work = tracking.get(assignment.indent_id)
        if work is None or work.completion_status == "Pending":
            pending.append(assignment.indent_id)
    return pending


def completed_work(snapshot: WorkflowSnapshot) -> List[Any]:
    return [t for t in snapshot.tracking if t.completion_status == "Completed"]


def pending_inspection(snapshot: WorkflowSnapshot) -> List[Any]:
    inspected_ids = {i.indent_id for i in snapshot.inspections}
    return [
        t.indent_id for t in completed_work(snapshot) if t.indent_id not in inspected_ids
    ]


def inspected(snapshot: WorkflowSnapshot) -> Tuple[List[Any], List[Any]]:
    """Inspection rows split into (result Done, anything else)."""
    done = [i for i in snapshot.inspections if i.inspection_result == "Done"]
    not_done = [i for i in snapshot.inspections if i.inspection_result != "Done"]
    return done, not_done


def pending_payment(snapshot: WorkflowSnapshot) -> List[Any]:
    paid_ids = {p.indent_id for p in snapshot.payments}
    done, _ = inspected(snapshot)
    return [i.indent_id for i in done if i.indent_id not in paid_ids]


def paid(snapshot: WorkflowSnapshot) -> List[Any]:
    return list(snapshot.payments)


# ────────────────────────────── QUEUES ──────────────────────────────

Queue = Tuple[List[IndentProgress], List[IndentProgress]]


def _split(rows: Sequence[IndentProgress], is_pending) -> Queue:
    pending = [p for p in rows if is_pending(p)]
    history = [p for p in rows if not is_pending(p)]
    return pending, history


def approval_queue(snapshot: WorkflowSnapshot) -> Queue:
    return _split(
        all_progress(snapshot),
        lambda p: (_status(p.approval, "approval_status") or "Pending") == "Pending",
    )


def assignment_queue(snapshot: WorkflowSnapshot) -> Queue:
    eligible = [
        p for p in all_progress(snapshot)
        if _status(p.approval, "approval_status") == "Approved"
    ]
    return _split(eligible, lambda p: p.assignment is None)


def work_queue(snapshot: WorkflowSnapshot) -> Queue:
    eligible = [p for p in all_progress(snapshot) if p.assignment is not None]
    return _split(
        eligible,
        lambda p: (_status(p.tracking, "completion_status") or "Pending") == "Pending",
    )


def inspection_queue(snapshot: WorkflowSnapshot) -> Queue:
    eligible = [
        p for p in all_progress(snapshot)
        if _status(p.tracking, "completion_status") == "Completed"
    ]
    return _split(eligible, lambda p: p.inspection is None)


def payment_queue(snapshot: WorkflowSnapshot) -> Queue:
    eligible = [
        p for p in all_progress(snapshot)
        if _status(p.inspection, "inspection_result") == "Done"
    ]
    return _split(eligible, lambda p: p.payment is None)


# ────────────────────────────── SUMMARY ──────────────────────────────

def percent_of(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, 2)


def summarize(snapshot: WorkflowSnapshot) -> WorkflowSummary:
    total = len(snapshot.indents)
    done, not_done = inspected(snapshot)
    priority_counts = {
        level: sum(1 for i in snapshot.indents if i.priority == level)
        for level in PRIORITIES
    }
    return WorkflowSummary(
        total_indents=total,
        pending_approval=len(pending_approval(snapshot)),
        approved=len(approved(snapshot)),
        rejected=len(rejected(snapshot)),
        pending_assignment=len(pending_assignment(snapshot)),
        assigned=len(snapshot.assignments),
        work_pending=len(pending_work(snapshot)),
        work_completed=len(completed_work(snapshot)),
        pending_inspection=len(pending_inspection(snapshot)),
        inspected=len(snapshot.inspections),
        inspection_done=len(done),
        inspection_not_done=len(not_done),
        pending_payment=len(pending_payment(snapshot)),
        payment_done=len(snapshot.payments),
        priority_counts=priority_counts,
        priority_pct={
            level: percent_of(count, total) for level, count in priority_counts.items()
        },
    )


def recent_activity(snapshot: WorkflowSnapshot, limit: int = 10) -> List[Tuple[Any, str]]:
    """The newest `limit` indents paired with their current stage."""
    joined = _Joined(snapshot)
    return [
        (indent, resolve_stage(joined.progress(indent)))
        for indent in snapshot.indents[:limit]
    ]
