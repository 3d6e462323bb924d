# indent_tracker/storage.py

import logging
import os
import uuid

from fastapi import HTTPException, UploadFile

from . import config


class StorageError(Exception):
    status_code = 502


class BlobStore:
    """Bucket-per-directory file store with public URLs under PUBLIC_BASE_URL."""

    def __init__(self, root: str = None, bucket: str = None, base_url: str = None):
        self.root = root or config.UPLOAD_DIR
        self.bucket = bucket or config.STORAGE_BUCKET
        self.base_url = (base_url or config.PUBLIC_BASE_URL).rstrip("/")

    def _full_path(self, path: str) -> str:
        normalized = os.path.normpath(path).lstrip(os.sep)
        if normalized.startswith(".."):
            raise StorageError(f"Invalid object path: {path}")
        return os.path.join(self.root, self.bucket, normalized)

    def upload(self, path: str, data: bytes) -> None:
        target = self._full_path(path)
        if os.path.exists(target):
            raise StorageError(f"Object already exists: {path}")
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "wb") as fh:
                fh.write(data)
        except OSError as e:
            logging.exception("Error uploading %s: %s", path, e)
            raise StorageError(f"Error uploading {path}")
        logging.info("Stored %s (%d bytes)", path, len(data))

    def remove(self, path: str) -> None:
        target = self._full_path(path)
        try:
            os.remove(target)
        except FileNotFoundError:
            return
        except OSError as e:
            logging.exception("Error removing %s: %s", path, e)
            raise StorageError(f"Error removing {path}")
        logging.info("Removed %s", path)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path.lstrip('/')}"


def object_path(folder: str, filename: str) -> str:
    """Random object name under `folder`, keeping the upload's extension."""
    _, ext = os.path.splitext(filename or "")
    return f"{folder.strip('/')}/{uuid.uuid4().hex}{ext.lower()}"


def read_image(file: UploadFile, max_bytes: int = None) -> bytes:
    """Body of an image upload; 415 for other content types, 413 past the size cap."""
    limit = max_bytes if max_bytes is not None else config.MAX_UPLOAD_BYTES
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=415, detail="Only image uploads are accepted")
    data = file.file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {limit} bytes")
    return data


def get_blob_store() -> BlobStore:
    return BlobStore()
