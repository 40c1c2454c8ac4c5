import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError
from ....infrastructure.cache import flag_cache_key, get_cache, set_cache
from ....infrastructure.db import get_db
from ....infrastructure.metrics import cache_hits_total, cache_misses_total, store_errors_total
from ....infrastructure.repositories import ClassRepository, FlagRepository
from ..errors import internal_error
from ..schemas import FlagOut

logger = structlog.get_logger()

router = APIRouter(prefix="/flags", tags=["flags"])


@router.get("/single/{name}", response_model=FlagOut, responses={404: {"description": "Flag not found"}})
def flag_by_name(name: str, db: Database = Depends(get_db)):
    # flags are static reference data, safe to cache
    cache_key = flag_cache_key(name)
    cached = get_cache(cache_key)
    if cached:
        cache_hits_total.inc()
        return cached

    cache_misses_total.inc()
    flag = FlagRepository(db).by_name(name)
    if flag is None:
        return JSONResponse(status_code=404, content={"error": "Flag not found"})
    result = FlagOut(name=flag.name, image=flag.image)
    set_cache(cache_key, result.model_dump())
    return result


@router.get("/instructor/{identifier}", response_model=list[str])
def flags_for_instructor(identifier: str, db: Database = Depends(get_db)):
    """Flag images of the languages an instructor teaches, at most two."""
    try:
        languages = ClassRepository(db).languages_for_instructor(identifier)
        return FlagRepository(db).images_for_languages(languages, limit=2)
    except PyMongoError as e:
        store_errors_total.labels(operation="flags_for_instructor").inc()
        logger.error("flags_for_instructor_failed", identifier=identifier, error=str(e))
        raise internal_error()
