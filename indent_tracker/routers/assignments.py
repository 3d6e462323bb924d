import logging

from fastapi import APIRouter, Depends

from .. import models, schemas
from ..sms import send_sms
from ..store import RecordStore, get_store, load_snapshot
from ..views import pick_tab, progress_out, queue_out, require_action, require_progress
from ..workflow import ASSIGN, assignment_queue
from .auth import get_current_user

router = APIRouter(prefix="/assignments", tags=["Technician Assignment"])

@router.get("/", response_model=schemas.QueueOut)
def get_assignments(tab: str = "pending", store: RecordStore = Depends(get_store)):
    return queue_out(tab, pick_tab(assignment_queue(load_snapshot(store)), tab))

@router.post("/{indent_id}", response_model=schemas.IndentProgressOut)
def assign_technician(
    indent_id: int,
    req: schemas.AssignmentCreate,
    store: RecordStore = Depends(get_store),
    user: models.User = Depends(get_current_user),
):
    progress = require_progress(load_snapshot(store), indent_id)
    require_action(progress, ASSIGN)
    store.upsert("technician_assignments", "indent_id", indent_id, {
        **req.model_dump(),
        "assigned_by": str(user.id),
    })

    indent = progress.indent
    notified = send_sms(
        req.phone_number,
        f"Indent {indent.indent_no}: {indent.machine_name} ({indent.department}) "
        f"assigned to you for {req.assigned_date.isoformat()}",
    )
    if not notified:
        logging.info("Technician %s not notified by SMS", req.technician_name)

    return progress_out(require_progress(load_snapshot(store), indent_id))
