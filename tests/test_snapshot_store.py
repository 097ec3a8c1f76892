from datetime import datetime, timezone

from clash_solver.models.saved_timetable import SavedTimetable
from clash_solver.schemas.timetable import SessionKind, Snapshot
from clash_solver.services.snapshot_store import SqlSnapshotStore
from clash_solver.services.store import ScheduleStore


def test_sql_store_round_trips_a_collection(session_factory, make_entry):
    backend = SqlSnapshotStore(session_factory)
    lab_course = make_entry("PHY", ("MONDAY", "09:00", "10:30"), ("FRIDAY", "14:00", "17:00", "LAB"))
    snaps = [
        Snapshot(id="new", created_at=datetime(2024, 9, 3, tzinfo=timezone.utc), entries=(lab_course,)),
        Snapshot(id="old", created_at=datetime(2024, 9, 1, tzinfo=timezone.utc), entries=()),
    ]

    backend.save_all(snaps)
    loaded = backend.load_all()

    assert [s.id for s in loaded] == ["new", "old"]
    assert loaded[0].entries == (lab_course,)
    assert loaded[0].entries[0].session(SessionKind.LAB).start.hour == 14


def test_reloaded_snapshot_equals_the_saved_one(session_factory, clock, make_entry):
    store = ScheduleStore(SqlSnapshotStore(session_factory), clock=clock)
    store.add_entry(make_entry("CS101", ("MONDAY", "09:00", "10:30")))
    snap = store.save_snapshot()

    reopened = ScheduleStore(SqlSnapshotStore(session_factory), clock=clock)

    assert reopened.saved[0] == snap
    assert reopened.saved[0].created_at.tzinfo is not None


def test_save_all_replaces_everything(session_factory, make_entry):
    backend = SqlSnapshotStore(session_factory)
    when = datetime(2024, 9, 1, tzinfo=timezone.utc)
    backend.save_all([Snapshot(id="a", created_at=when), Snapshot(id="b", created_at=when)])
    backend.save_all([Snapshot(id="b", created_at=when)])

    db = session_factory()
    try:
        assert [r.id for r in db.query(SavedTimetable).all()] == ["b"]
    finally:
        db.close()


def test_schedule_store_on_sql_backend(session_factory, clock, make_entry):
    store = ScheduleStore(SqlSnapshotStore(session_factory), clock=clock)
    store.add_entry(make_entry("CS101", ("MONDAY", "09:00", "10:30")))
    snap = store.save_snapshot()

    reopened = ScheduleStore(SqlSnapshotStore(session_factory), clock=clock)
    reopened.load_snapshot(snap.id)
    assert [e.id for e in reopened.active] == ["CS101"]

    reopened.delete_snapshot(snap.id)
    assert SqlSnapshotStore(session_factory).load_all() == []
