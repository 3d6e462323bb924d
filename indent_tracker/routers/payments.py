from fastapi import APIRouter, Depends, File, UploadFile

from .. import models, schemas
from ..storage import BlobStore, get_blob_store, object_path, read_image
from ..store import RecordStore, get_store, load_snapshot
from ..views import pick_tab, progress_out, queue_out, require_action, require_progress
from ..workflow import PAY, payment_queue
from .auth import get_current_user

router = APIRouter(prefix="/payments", tags=["Payment"])

@router.get("/", response_model=schemas.QueueOut)
def get_payments(tab: str = "pending", store: RecordStore = Depends(get_store)):
    return queue_out(tab, pick_tab(payment_queue(load_snapshot(store)), tab, "completed"))

@router.post("/bill-image", response_model=schemas.UploadOut)
def upload_bill(
    file: UploadFile = File(...),
    blobs: BlobStore = Depends(get_blob_store),
    user: models.User = Depends(get_current_user),
):
    data = read_image(file)
    path = object_path("payment-bills", file.filename)
    blobs.upload(path, data)
    return {"path": path, "public_url": blobs.public_url(path)}

@router.post("/{indent_id}", response_model=schemas.IndentProgressOut)
def record_payment(
    indent_id: int,
    req: schemas.PaymentCreate,
    store: RecordStore = Depends(get_store),
    user: models.User = Depends(get_current_user),
):
    require_action(require_progress(load_snapshot(store), indent_id), PAY)
    store.upsert("payments", "indent_id", indent_id, {
        **req.model_dump(),
        "created_by": str(user.id),
    })
    return progress_out(require_progress(load_snapshot(store), indent_id))
