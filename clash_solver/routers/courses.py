# clash_solver/routers/courses.py
from fastapi import APIRouter, Depends, Query

from clash_solver.config import settings
from clash_solver.schemas.clash import CourseSuggestOut
from clash_solver.schemas.course import RawCourseRecord
from clash_solver.services.catalog import AsyncCatalog, LookupSequencer
from clash_solver.utils.deps import get_catalog, get_suggest_sequencer


router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get("/details", response_model=RawCourseRecord, response_model_by_alias=True)
async def course_details(
    section: str = Query(..., description="班級/section, e.g. sp23-bse-a"),
    course: str = Query(..., description="課程名稱"),
    catalog: AsyncCatalog = Depends(get_catalog),
):
    return await catalog.lookup(section, course)


@router.get("/suggest", response_model=CourseSuggestOut)
async def suggest_courses(
    q: str = Query("", description="課程名稱關鍵字"),
    limit: int = Query(settings.SUGGEST_LIMIT, ge=1, le=50),
    catalog: AsyncCatalog = Depends(get_catalog),
    sequencer: LookupSequencer = Depends(get_suggest_sequencer),
):
    # an older keystroke answering late gets a 409 instead of replacing newer suggestions
    names = await sequencer.run(catalog.suggest, q, limit)
    return CourseSuggestOut(query=q, names=names)
