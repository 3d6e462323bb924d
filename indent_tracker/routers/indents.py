from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from .. import models, schemas
from ..storage import BlobStore, get_blob_store, object_path, read_image
from ..store import RecordStore, StoreError, get_store, load_snapshot, next_indent_no
from ..views import progress_out, require_progress
from ..workflow import all_progress
from .auth import get_current_user

router = APIRouter(prefix="/indents", tags=["Indents"])

@router.post("/", response_model=schemas.IndentOut, status_code=201)
def create_indent(
    req: schemas.IndentCreate,
    store: RecordStore = Depends(get_store),
    user: models.User = Depends(get_current_user),
):
    new = store.insert("indents", {
        "indent_no": next_indent_no(store),
        **req.model_dump(),
        "created_by": str(user.id),
    })
    return new

@router.get("/", response_model=List[schemas.IndentProgressOut])
def get_indents(store: RecordStore = Depends(get_store)):
    return [progress_out(p) for p in all_progress(load_snapshot(store))]

@router.get("/{indent_id}", response_model=schemas.IndentProgressOut)
def get_indent(indent_id: int, store: RecordStore = Depends(get_store)):
    return progress_out(require_progress(load_snapshot(store), indent_id))

@router.post("/{indent_id}/image", response_model=schemas.IndentOut)
def upload_image(
    indent_id: int,
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
    user: models.User = Depends(get_current_user),
):
    if store.get("indents", id=indent_id) is None:
        raise HTTPException(status_code=404, detail="Indent not found")
    data = read_image(file)
    path = object_path("indent-images", file.filename)
    blobs.upload(path, data)
    try:
        return store.update("indents", {"id": indent_id}, {"image_url": blobs.public_url(path)})
    except StoreError:
        blobs.remove(path)
        raise
