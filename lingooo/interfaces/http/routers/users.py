import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.database import Database
from pymongo.errors import PyMongoError
from ....application.dto import EnrollClassInput
from ....application.use_cases.enroll_class import ClassNotFound, EnrollClass, EnrollmentRejected, StudentNotFound
from ....infrastructure.db import get_db
from ....infrastructure.metrics import store_errors_total
from ....infrastructure.repositories import ClassRepository, UserRepository
from ..authz import Caller, require_student, require_token
from ..errors import internal_error
from ..schemas import ClassOut, EnrollReq, MessageResp, SelectClassReq

logger = structlog.get_logger()

router = APIRouter(tags=["users"])


def _store_failure(operation: str, caller: Caller, e: PyMongoError) -> HTTPException:
    store_errors_total.labels(operation=operation).inc()
    logger.error(f"{operation}_failed", identifier=caller.identifier, error=str(e))
    return internal_error()


@router.patch("/users/add_class", response_model=MessageResp)
def add_selected_class(payload: SelectClassReq,
                       caller: Caller = Depends(require_student),
                       db: Database = Depends(get_db)):
    if payload.identifier is not None and payload.identifier != caller.identifier:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    try:
        added = UserRepository(db).add_selected_class(caller.identifier, payload.classId)
    except PyMongoError as e:
        raise _store_failure("add_selected_class", caller, e)
    if not added:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Class already selected")
    return MessageResp(message="Class added")


@router.delete("/student/selected_classes/{class_id}", response_model=MessageResp)
def remove_selected_class(class_id: str,
                          caller: Caller = Depends(require_student),
                          db: Database = Depends(get_db)):
    try:
        removed = UserRepository(db).remove_selected_class(caller.identifier, class_id)
    except PyMongoError as e:
        raise _store_failure("remove_selected_class", caller, e)
    if not removed:
        raise HTTPException(status_code=404, detail="Class not in selection")
    return MessageResp(message="Class removed")


def _resolve_classes(db: Database, identifier: str, attr: str) -> list[ClassOut]:
    user = UserRepository(db).get_by_uid(identifier)
    if user is None:
        return []
    return [ClassOut.model_validate(c) for c in ClassRepository(db).get_many(getattr(user, attr))]


@router.get("/users/students/selectedClasses/{identifier}", response_model=list[ClassOut])
def selected_classes(identifier: str, _: str = Depends(require_token), db: Database = Depends(get_db)):
    return _resolve_classes(db, identifier, "selectedClasses")


@router.get("/users/students/enrolledClasses/{identifier}", response_model=list[ClassOut])
def enrolled_classes(identifier: str, _: str = Depends(require_token), db: Database = Depends(get_db)):
    return _resolve_classes(db, identifier, "enrolledClasses")


@router.post("/student/enroll", response_model=ClassOut)
def enroll(payload: EnrollReq,
           caller: Caller = Depends(require_student),
           db: Database = Depends(get_db)):
    uc = EnrollClass(users=UserRepository(db), classes=ClassRepository(db))
    try:
        cls = uc.execute(EnrollClassInput(uid=caller.identifier, class_id=payload.classId))
    except (ClassNotFound, StudentNotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EnrollmentRejected as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PyMongoError as e:
        raise _store_failure("enroll", caller, e)
    logger.info("student_enrolled", identifier=caller.identifier, class_id=payload.classId)
    return ClassOut.model_validate(cls)
