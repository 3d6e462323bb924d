# indent_tracker/main.py

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import config
from .database import Base, engine
from .routers import approvals, assignments, auth, dashboard, indents, inspections, payments, work_tracking
from .storage import StorageError
from .store import StoreError

logging.basicConfig(level=config.LOG_LEVEL)

# ────────────────────────────── DATABASE ──────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    config.require_secret_key()
    Base.metadata.create_all(bind=engine)
    logging.info("Database tables ready")
    yield
    engine.dispose()

app = FastAPI(
    title="Indent Tracker",
    description="Maintenance indents through approval, technician assignment, work tracking, inspection and payment",
    version="1.0.0",
    lifespan=lifespan
)

# ────────────────────────────── CORS ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ────────────────────────────── ERRORS ──────────────────────────────
# Store and storage failures are logged where they happen; the caller only
# gets a generic notice.

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

# ────────────────────────────── FILES ──────────────────────────────
os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount(config.FILES_ROUTE, StaticFiles(directory=config.UPLOAD_DIR), name="files")

# ────────────────────────────── ROUTERS ──────────────────────────────
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(indents.router)
app.include_router(approvals.router)
app.include_router(assignments.router)
app.include_router(work_tracking.router)
app.include_router(inspections.router)
app.include_router(payments.router)
