# clash_solver/routers/clash.py
from fastapi import APIRouter, Depends, Query, Response

from clash_solver.schemas.clash import AddCourseIn, SnapshotSummary, TimetableStateOut
from clash_solver.schemas.course import RawCourseRecord
from clash_solver.schemas.timetable import Conflict, Entry, Placement, SessionKind, Slot, Weekday
from clash_solver.services.catalog import AsyncCatalog
from clash_solver.services.store import ScheduleStore
from clash_solver.utils.deps import get_catalog, get_store
from clash_solver.utils.normalize import normalize

import logging
logger = logging.getLogger("clash_solver.clash")


router = APIRouter(prefix="/clash", tags=["Clash Solver"])


def _state(store: ScheduleStore) -> TimetableStateOut:
    conflicts = store.list_conflicts()
    return TimetableStateOut(
        active=store.active,
        minimized=store.minimized,
        conflicts=conflicts,
        clash_count=len(conflicts),
    )


@router.get("", response_model=TimetableStateOut)
def get_state(store: ScheduleStore = Depends(get_store)):
    return _state(store)


# 從課程目錄加入
@router.post("/entries", response_model=TimetableStateOut, status_code=201)
async def add_course(
    body: AddCourseIn,
    store: ScheduleStore = Depends(get_store),
    catalog: AsyncCatalog = Depends(get_catalog),
):
    record = await catalog.lookup(body.section_name, body.course_name)
    entry = normalize(record)
    store.add_entry(entry)
    logger.info("Added %s (%d sessions)", entry.id, len(entry.sessions))
    return _state(store)


# 手動輸入
@router.post("/entries/manual", response_model=TimetableStateOut, status_code=201)
def add_manual_course(body: RawCourseRecord, store: ScheduleStore = Depends(get_store)):
    entry = store.add_record(body)
    logger.info("Added %s by hand (%d sessions)", entry.id, len(entry.sessions))
    return _state(store)


@router.get("/entries", response_model=list[Entry])
def list_active(store: ScheduleStore = Depends(get_store)):
    return store.active


@router.delete("/entries/{entry_id:path}", response_model=TimetableStateOut)
def remove_course(entry_id: str, store: ScheduleStore = Depends(get_store)):
    store.remove_entry(entry_id)
    return _state(store)


@router.post("/entries/{entry_id:path}/minimize", response_model=TimetableStateOut)
def minimize_course(entry_id: str, store: ScheduleStore = Depends(get_store)):
    store.minimize_entry(entry_id)
    return _state(store)


@router.get("/minimized", response_model=list[Entry])
def list_minimized(store: ScheduleStore = Depends(get_store)):
    return store.minimized


@router.post("/minimized/{entry_id:path}/restore", response_model=TimetableStateOut)
def restore_course(entry_id: str, store: ScheduleStore = Depends(get_store)):
    store.restore_entry(entry_id)
    return _state(store)


@router.get("/conflicts", response_model=list[Conflict])
def list_conflicts(store: ScheduleStore = Depends(get_store)):
    return store.list_conflicts()


@router.get("/grid", response_model=list[Slot])
def get_grid(store: ScheduleStore = Depends(get_store)):
    return store.grid()


@router.get("/placement", response_model=Placement)
def get_placement(
    entry_id: str = Query(...),
    kind: SessionKind = Query(...),
    store: ScheduleStore = Depends(get_store),
):
    return store.place(entry_id, kind)


@router.get("/layout/{day}", response_model=list[Placement])
def get_day_layout(day: Weekday, store: ScheduleStore = Depends(get_store)):
    return store.layout_day(day)


# ===== 已儲存的課表 =====

@router.get("/snapshots", response_model=list[SnapshotSummary])
def list_snapshots(store: ScheduleStore = Depends(get_store)):
    return [SnapshotSummary.of(s) for s in store.saved]


@router.post("/snapshots", response_model=SnapshotSummary, status_code=201)
def save_snapshot(store: ScheduleStore = Depends(get_store)):
    snapshot = store.save_snapshot()
    if snapshot is None:
        # nothing active, nothing saved
        return Response(status_code=204)
    return SnapshotSummary.of(snapshot)


@router.post("/snapshots/{snapshot_id}/load", response_model=TimetableStateOut)
def load_snapshot(snapshot_id: str, store: ScheduleStore = Depends(get_store)):
    store.load_snapshot(snapshot_id)
    return _state(store)


@router.delete("/snapshots/{snapshot_id}")
def delete_snapshot(snapshot_id: str, store: ScheduleStore = Depends(get_store)):
    deleted = store.delete_snapshot(snapshot_id)
    return {"message": "Deleted" if deleted else "Nothing to delete", "deleted": deleted}
