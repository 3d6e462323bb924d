# indent_tracker/store.py

import logging

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .database import get_db
from .workflow import WorkflowSnapshot

TABLES = {
    "indents": models.Indent,
    "approvals": models.Approval,
    "technician_assignments": models.TechnicianAssignment,
    "work_tracking": models.WorkTracking,
    "inspections": models.Inspection,
    "payments": models.Payment,
}


class StoreError(Exception):
    status_code = 500

    def __init__(self, message: str = "Record store operation failed"):
        super().__init__(message)
        self.message = message


class WriteConflict(StoreError):
    status_code = 409


# ────────────────────────────── CLIENT ──────────────────────────────

class RecordStore:
    """list / insert / update / upsert over named tables."""

    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}")

    def _query(self, table: str, filters: dict):
        model = self._model(table)
        query = self.db.query(model)
        for column, value in filters.items():
            query = query.filter(getattr(model, column) == value)
        return model, query

    def list(self, table: str, order_by=None, descending: bool = False, **filters):
        model, query = self._query(table, filters)
        if order_by is not None:
            column = getattr(model, order_by)
            id_column = model.id
            if descending:
                query = query.order_by(column.desc(), id_column.desc())
            else:
                query = query.order_by(column.asc(), id_column.asc())
        try:
            return query.all()
        except SQLAlchemyError as e:
            logging.exception("Error fetching %s: %s", table, e)
            raise StoreError(f"Error fetching {table}")

    def get(self, table: str, **filters):
        _, query = self._query(table, filters)
        try:
            return query.first()
        except SQLAlchemyError as e:
            logging.exception("Error fetching %s: %s", table, e)
            raise StoreError(f"Error fetching {table}")

    def insert(self, table: str, row: dict):
        record = self._model(table)(**row)
        self.db.add(record)
        return self._commit(table, record)

    def update(self, table: str, filters: dict, patch: dict):
        record = self.get(table, **filters)
        if record is None:
            raise StoreError(f"No {table} row matches {filters}")
        for column, value in patch.items():
            setattr(record, column, value)
        self.db.add(record)
        return self._commit(table, record)

    def upsert(self, table: str, key: str, value, values: dict):
        """Update the row where `key == value` in place, or insert one.

        Dependent tables carry a unique constraint on their key, so a racing
        second insert surfaces as WriteConflict rather than a duplicate row.
        """
        existing = self.get(table, **{key: value})
        if existing is not None:
            logging.info("Updating %s where %s=%s", table, key, value)
            return self.update(table, {key: value}, values)
        logging.info("Inserting into %s for %s=%s", table, key, value)
        return self.insert(table, {key: value, **values})

    def _commit(self, table: str, record):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logging.warning("Write conflict on %s: %s", table, e.orig)
            raise WriteConflict(f"Conflicting write to {table}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.exception("Error writing %s: %s", table, e)
            raise StoreError(f"Error writing {table}")
        self.db.refresh(record)
        return record


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


# ────────────────────────────── SNAPSHOT ──────────────────────────────

def load_snapshot(store: RecordStore) -> WorkflowSnapshot:
    """Fetch all six collections and freeze them for the resolver."""
    return WorkflowSnapshot.of(
        indents=[
            schemas.IndentOut.model_validate(row)
            for row in store.list("indents", order_by="created_at", descending=True)
        ],
        approvals=[schemas.ApprovalOut.model_validate(row) for row in store.list("approvals")],
        assignments=[
            schemas.AssignmentOut.model_validate(row)
            for row in store.list("technician_assignments")
        ],
        tracking=[schemas.TrackingOut.model_validate(row) for row in store.list("work_tracking")],
        inspections=[
            schemas.InspectionOut.model_validate(row) for row in store.list("inspections")
        ],
        payments=[schemas.PaymentOut.model_validate(row) for row in store.list("payments")],
    )


def next_indent_no(store: RecordStore) -> str:
    """Sequence numbers run IND-0001, IND-0002, ... in creation order."""
    highest = 0
    for indent in store.list("indents"):
        prefix, _, number = indent.indent_no.partition("-")
        if prefix == "IND" and number.isdigit():
            highest = max(highest, int(number))
    return f"IND-{highest + 1:04d}"
