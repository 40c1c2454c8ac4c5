from typing import Literal
import structlog
from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from pymongo.errors import PyMongoError
from ....infrastructure.db import get_db
from ....infrastructure.metrics import store_errors_total
from ....infrastructure.repositories import ClassRepository
from ..errors import internal_error
from ..schemas import ClassOut

logger = structlog.get_logger()

router = APIRouter(prefix="/classes", tags=["classes"])

ClassSort = Literal[
    "Sort by name A to Z",
    "Sort by name Z to A",
    "Sort by price low to high",
    "Sort by price high to low",
    "Sort by popularity low to high",
    "Sort by popularity high to low",
    "Sort by availability low to high",
    "Sort by availability high to low",
]


@router.get("", response_model=list[ClassOut])
def list_classes(db: Database = Depends(get_db),
                 quantity: int | None = Query(None, ge=1),
                 filter: ClassSort | None = Query(None)):
    try:
        rows = ClassRepository(db).find_all(quantity=quantity, sort=filter)
    except PyMongoError as e:
        store_errors_total.labels(operation="list_classes").inc()
        logger.error("list_classes_failed", error=str(e))
        raise internal_error()
    return [ClassOut.model_validate(row) for row in rows]
