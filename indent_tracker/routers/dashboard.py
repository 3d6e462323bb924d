from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..store import RecordStore, get_store, load_snapshot
from ..views import stats_out
from ..workflow import recent_activity, summarize

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

@router.get("/", response_model=schemas.DashboardOut)
def get_dashboard(limit: int = Query(10, ge=0, le=100), store: RecordStore = Depends(get_store)):
    snapshot = load_snapshot(store)
    recent = [
        schemas.RecentActivity(
            id=indent.id,
            indent_no=indent.indent_no,
            machine_name=indent.machine_name,
            priority=indent.priority,
            status=stage,
            created_at=indent.created_at,
        )
        for indent, stage in recent_activity(snapshot, limit=limit)
    ]
    return {"stats": stats_out(summarize(snapshot)), "recent_activity": recent}
