from datetime import datetime, timezone
import structlog
from fastapi import APIRouter, Depends, status
from pymongo.database import Database
from pymongo.errors import PyMongoError
from ....domain.entities import Review
from ....infrastructure.db import get_db
from ....infrastructure.metrics import store_errors_total
from ....infrastructure.repositories import UserRepository
from ..authz import Caller, require_student
from ..errors import internal_error
from ..schemas import MessageResp, ReviewCreate, ReviewOut

logger = structlog.get_logger()

router = APIRouter(tags=["reviews"])


@router.get("/reviews", response_model=list[ReviewOut])
def all_reviews(db: Database = Depends(get_db)):
    try:
        return UserRepository(db).student_reviews()
    except PyMongoError as e:
        store_errors_total.labels(operation="all_reviews").inc()
        logger.error("all_reviews_failed", error=str(e))
        raise internal_error()


@router.get("/student/reviews", response_model=list)
def my_reviews(caller: Caller = Depends(require_student), db: Database = Depends(get_db)):
    try:
        reviews = UserRepository(db).reviews_of(caller.identifier)
    except PyMongoError as e:
        store_errors_total.labels(operation="my_reviews").inc()
        logger.error("my_reviews_failed", identifier=caller.identifier, error=str(e))
        raise internal_error()
    if reviews is None:
        # user vanished between the role check and this read
        logger.error("my_reviews_missing_user", identifier=caller.identifier)
        raise internal_error()
    return reviews


@router.post("/student/reviews", response_model=MessageResp, status_code=status.HTTP_201_CREATED)
def add_review(payload: ReviewCreate, caller: Caller = Depends(require_student), db: Database = Depends(get_db)):
    review = Review(review=payload.review, rating=payload.rating, createdAt=datetime.now(timezone.utc))
    try:
        saved = UserRepository(db).add_review(caller.identifier, review)
    except PyMongoError as e:
        store_errors_total.labels(operation="add_review").inc()
        logger.error("add_review_failed", identifier=caller.identifier, error=str(e))
        raise internal_error()
    if not saved:
        raise internal_error()
    return MessageResp(message="Review added")
