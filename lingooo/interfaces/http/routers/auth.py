import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from ....application.dto import RegisterUserInput
from ....application.use_cases.register_user import RegisterUser, UserAlreadyExists
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import create_access_token
from ..authz import require_token
from ..errors import internal_error
from ..limits import limiter, per_minute
from ..schemas import AddUserReq, RoleResp, TokenReq, TokenResp, UserOut

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/request_access_token", response_model=TokenResp)
@limiter.limit(per_minute)
def request_access_token(request: Request, payload: TokenReq):
    return TokenResp(token=create_access_token(payload.identifier))


@router.post("/add_user", response_model=UserOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(per_minute)
def add_user(request: Request, payload: AddUserReq, db: Database = Depends(get_db)):
    uc = RegisterUser(repo=UserRepository(db))
    data = RegisterUserInput(
        uid=payload.identifier,
        displayName=payload.displayName,
        photoURL=payload.photoURL,
        email=payload.email,
    )
    try:
        user = uc.execute(data)
    except (UserAlreadyExists, DuplicateKeyError):
        # DuplicateKeyError: lost a race against a concurrent registration
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PyMongoError as e:
        logger.error("add_user_failed", identifier=payload.identifier, error=str(e))
        raise internal_error()
    logger.info("user_registered", identifier=user.uid)
    return UserOut.model_validate(user)


@router.get("/verify_user_role/{identifier}", response_model=RoleResp)
def verify_user_role(identifier: str, _: str = Depends(require_token), db: Database = Depends(get_db)):
    role = UserRepository(db).get_role(identifier)
    if role is None:
        raise HTTPException(status_code=404, detail="User not found")
    return RoleResp(role=role)
