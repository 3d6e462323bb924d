from fastapi import APIRouter, Depends

from .. import models, schemas
from ..store import RecordStore, get_store, load_snapshot
from ..views import pick_tab, progress_out, queue_out, require_action, require_progress
from ..workflow import INSPECT, inspection_queue
from .auth import get_current_user

router = APIRouter(prefix="/inspections", tags=["Inspection"])

@router.get("/", response_model=schemas.QueueOut)
def get_inspections(tab: str = "pending", store: RecordStore = Depends(get_store)):
    return queue_out(tab, pick_tab(inspection_queue(load_snapshot(store)), tab))

@router.post("/{indent_id}", response_model=schemas.IndentProgressOut)
def inspect(
    indent_id: int,
    req: schemas.InspectionCreate,
    store: RecordStore = Depends(get_store),
    user: models.User = Depends(get_current_user),
):
    require_action(require_progress(load_snapshot(store), indent_id), INSPECT)
    store.upsert("inspections", "indent_id", indent_id, {
        **req.model_dump(),
        "created_by": str(user.id),
    })
    return progress_out(require_progress(load_snapshot(store), indent_id))
