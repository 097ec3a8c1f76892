from fastapi import Request

from clash_solver.services.catalog import AsyncCatalog, LookupSequencer
from clash_solver.services.store import ScheduleStore


def get_store(request: Request) -> ScheduleStore:
    return request.app.state.store


def get_catalog(request: Request) -> AsyncCatalog:
    return request.app.state.catalog


def get_suggest_sequencer(request: Request) -> LookupSequencer:
    """One sequencer per caller, keyed by X-Client-Id or else the client address."""
    key = request.headers.get("X-Client-Id")
    if not key:
        key = request.client.host if request.client else "anonymous"
    sequencers = request.app.state.suggest_sequencers
    if key not in sequencers:
        sequencers[key] = LookupSequencer()
    return sequencers[key]
