# indent_tracker/views.py

from typing import List

from fastapi import HTTPException

from . import schemas
from .workflow import (
    IndentProgress,
    WorkflowSnapshot,
    WorkflowSummary,
    allowed_actions,
    progress_for,
    resolve_stage,
)


def progress_out(progress: IndentProgress) -> schemas.IndentProgressOut:
    return schemas.IndentProgressOut(
        indent=progress.indent,
        stage=resolve_stage(progress),
        approval=progress.approval,
        assignment=progress.assignment,
        tracking=progress.tracking,
        inspection=progress.inspection,
        payment=progress.payment,
    )


def queue_out(tab: str, items: List[IndentProgress]) -> schemas.QueueOut:
    return schemas.QueueOut(
        tab=tab, count=len(items), items=[progress_out(p) for p in items]
    )


def pick_tab(queue, tab: str, history_name: str = "history") -> List[IndentProgress]:
    pending, history = queue
    if tab == "pending":
        return pending
    if tab == history_name:
        return history
    raise HTTPException(status_code=400, detail=f"Unknown tab: {tab}")


def require_progress(snapshot: WorkflowSnapshot, indent_id: int) -> IndentProgress:
    indent = next((i for i in snapshot.indents if i.id == indent_id), None)
    if indent is None:
        raise HTTPException(status_code=404, detail="Indent not found")
    return progress_for(snapshot, indent)


def require_action(progress: IndentProgress, action: str) -> None:
    if action not in allowed_actions(progress):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot {action} indent {progress.indent.indent_no} at stage "
                   f"'{resolve_stage(progress)}'",
        )


def stats_out(summary: WorkflowSummary) -> schemas.DashboardStats:
    counts, pct = summary.priority_counts, summary.priority_pct
    return schemas.DashboardStats(
        total_indents=summary.total_indents,
        pending_approval=summary.pending_approval,
        approved=summary.approved,
        rejected=summary.rejected,
        pending_assignment=summary.pending_assignment,
        assigned=summary.assigned,
        work_pending=summary.work_pending,
        work_completed=summary.work_completed,
        pending_inspection=summary.pending_inspection,
        inspected=summary.inspected,
        inspection_done=summary.inspection_done,
        inspection_not_done=summary.inspection_not_done,
        pending_payment=summary.pending_payment,
        payment_done=summary.payment_done,
        high_priority=counts.get("High", 0),
        medium_priority=counts.get("Medium", 0),
        low_priority=counts.get("Low", 0),
        high_priority_pct=pct.get("High", 0.0),
        medium_priority_pct=pct.get("Medium", 0.0),
        low_priority_pct=pct.get("Low", 0.0),
    )
