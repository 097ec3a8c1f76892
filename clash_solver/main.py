# clash_solver/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clash_solver.config import settings
from clash_solver.database import Base, SessionLocal, engine
from clash_solver.errors import ClashSolverError
from clash_solver.logging_config import setup_logging
from clash_solver.models import course, course_session, saved_timetable  # noqa: F401  register tables
from clash_solver.routers import clash, courses
from clash_solver.services.catalog import AsyncCatalog, CourseCatalog, SqlCourseCatalog
from clash_solver.services.snapshot_store import SnapshotStore, SqlSnapshotStore
from clash_solver.services.store import ScheduleStore


setup_logging()
logger = logging.getLogger("clash_solver")


def create_app(
    snapshot_store: SnapshotStore | None = None,
    catalog: CourseCatalog | None = None,
) -> FastAPI:
    if snapshot_store is None or catalog is None:
        # 建立資料表（若不存在）
        Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Clash Solver", version="1.0.0")

    # one working timetable per app instance, reached through Depends(get_store)
    app.state.store = ScheduleStore(snapshot_store or SqlSnapshotStore(SessionLocal))
    app.state.catalog = AsyncCatalog(catalog or SqlCourseCatalog(SessionLocal))
    # LookupSequencer per caller, filled by get_suggest_sequencer
    app.state.suggest_sequencers = {}

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        try:
            response = await call_next(request)
            ms = int((time.time() - start) * 1000)
            logger.info("%s %s -> %s (%dms)", request.method, request.url.path, response.status_code, ms)
            return response
        except Exception:
            ms = int((time.time() - start) * 1000)
            logger.exception("Unhandled error %s %s (%dms)", request.method, request.url.path, ms)
            raise

    @app.exception_handler(ClashSolverError)
    async def clash_solver_error(request: Request, exc: ClashSolverError):
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(clash.router)
    app.include_router(courses.router)

    @app.get("/")
    def root():
        return {"message": "Clash solver is running!"}

    return app


app = create_app()
