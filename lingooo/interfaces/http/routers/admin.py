from fastapi import APIRouter, Depends, HTTPException
from pymongo.database import Database
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ..authz import require_admin
from ..schemas import RoleResp, RoleUpdate, UserOut

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=list[UserOut])
def list_users(db: Database = Depends(get_db)):
    return [UserOut.model_validate(u) for u in UserRepository(db).list_all()]


@router.patch("/users/{identifier}/role", response_model=RoleResp)
def set_user_role(identifier: str, payload: RoleUpdate, db: Database = Depends(get_db)):
    if not UserRepository(db).set_role(identifier, payload.role):
        raise HTTPException(404, "User not found")
    return RoleResp(role=payload.role)
