from fastapi import APIRouter, Depends
from pymongo.database import Database
from ....domain.entities import Role
from ....infrastructure.db import get_db
from ....infrastructure.repositories import ClassRepository, UserRepository
from ..authz import Caller, require_instructor
from ..schemas import ClassOut, UserOut

router = APIRouter(tags=["instructors"])


@router.get("/instructors", response_model=list[UserOut])
def list_instructors(db: Database = Depends(get_db)):
    return [UserOut.model_validate(u) for u in UserRepository(db).list_by_role(Role.INSTRUCTOR.value)]


@router.get("/instructors/students/count/{identifier}", response_model=int)
def instructor_student_count(identifier: str, db: Database = Depends(get_db)):
    return ClassRepository(db).total_students(identifier)


@router.get("/instructors/classes/{identifier}", response_model=list[ClassOut])
def instructor_classes(identifier: str, db: Database = Depends(get_db)):
    return [ClassOut.model_validate(c) for c in ClassRepository(db).by_instructor(identifier)]


@router.get("/instructor/my_classes", response_model=list[ClassOut])
def my_classes(caller: Caller = Depends(require_instructor), db: Database = Depends(get_db)):
    return [ClassOut.model_validate(c) for c in ClassRepository(db).by_instructor(caller.identifier)]
