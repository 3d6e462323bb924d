"""
Record store client tests: list/insert/update, upsert-by-existence,
write conflicts and snapshot loading.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from indent_tracker import workflow as wf
from indent_tracker.store import RecordStore, StoreError, WriteConflict, load_snapshot, next_indent_no


@pytest.fixture()
def store(db_session):
    return RecordStore(db_session)


def _indent(store, **overrides):
    row = {
        "indent_no": next_indent_no(store),
        "machine_name": "Compressor",
        "department": "Maintenance",
        "problem": "Pressure drops",
        "priority": "Medium",
        "expected_delivery_days": 2,
    }
    row.update(overrides)
    return store.insert("indents", row)


class TestRecordStore:
    def test_insert_and_list(self, store):
        created = _indent(store)
        rows = store.list("indents")
        assert [r.id for r in rows] == [created.id]
        assert rows[0].indent_no == "IND-0001"

    def test_list_with_filter(self, store):
        _indent(store, priority="High")
        _indent(store, priority="Low")
        high = store.list("indents", priority="High")
        assert [r.priority for r in high] == ["High"]

    def test_list_ordered_newest_first(self, store):
        first = _indent(store)
        second = _indent(store)
        rows = store.list("indents", order_by="created_at", descending=True)
        assert [r.id for r in rows] == [second.id, first.id]

    def test_update(self, store):
        created = _indent(store)
        store.update("indents", {"id": created.id}, {"image_url": "/files/x.png"})
        assert store.get("indents", id=created.id).image_url == "/files/x.png"

    def test_update_missing_row(self, store):
        with pytest.raises(StoreError):
            store.update("indents", {"id": 999}, {"image_url": "x"})

    def test_unknown_table(self, store):
        with pytest.raises(StoreError):
            store.list("widgets")

    def test_sequence_numbers(self, store):
        _indent(store)
        _indent(store)
        assert next_indent_no(store) == "IND-0003"


class TestUpsert:
    def test_inserts_then_updates_in_place(self, store):
        created = _indent(store)
        first = store.upsert("approvals", "indent_id", created.id,
                             {"approval_status": "Rejected", "remarks": "quote too high"})
        second = store.upsert("approvals", "indent_id", created.id,
                              {"approval_status": "Approved", "remarks": "revised quote"})
        rows = store.list("approvals")
        assert len(rows) == 1
        assert first.id == second.id
        assert rows[0].approval_status == "Approved"
        assert rows[0].remarks == "revised quote"

    def test_same_helper_for_every_stage_table(self, store):
        created = _indent(store)
        store.upsert("approvals", "indent_id", created.id, {"approval_status": "Approved"})
        store.upsert("technician_assignments", "indent_id", created.id, {
            "technician_name": "Okello", "phone_number": "+256700000002",
            "assigned_date": date(2026, 3, 1),
        })
        store.upsert("work_tracking", "indent_id", created.id, {"completion_status": "Completed"})
        store.upsert("inspections", "indent_id", created.id, {
            "inspected_by": "QA", "inspection_date": date(2026, 3, 2), "inspection_result": "Done",
        })
        store.upsert("payments", "indent_id", created.id, {
            "bill_no": "B-17", "total_bill_amount": 1250.5,
        })
        snapshot = load_snapshot(store)
        assert wf.resolve_stages(snapshot) == {created.id: wf.PAYMENT_DONE}

    def test_second_insert_for_same_indent_conflicts(self, store):
        created = _indent(store)
        store.insert("approvals", {"indent_id": created.id, "approval_status": "Approved"})
        with pytest.raises(WriteConflict):
            store.insert("approvals", {"indent_id": created.id, "approval_status": "Rejected"})
        # session still usable after the rollback
        assert len(store.list("approvals")) == 1


class TestLoadSnapshot:
    def test_snapshot_is_frozen_and_ordered(self, store):
        older = _indent(store)
        newer = _indent(store)
        snapshot = load_snapshot(store)
        assert [i.id for i in snapshot.indents] == [newer.id, older.id]
        assert isinstance(snapshot.indents, tuple)
        with pytest.raises(ValidationError):
            snapshot.indents[0].priority = "Low"

    def test_empty_store(self, store):
        snapshot = load_snapshot(store)
        assert wf.summarize(snapshot).total_indents == 0
