from dataclasses import dataclass
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pymongo.database import Database
from pymongo.errors import PyMongoError
from ...domain.entities import Role
from ...infrastructure.db import get_db
from ...infrastructure.metrics import auth_denials_total
from ...infrastructure.repositories import UserRepository
from ...infrastructure.security import decode_token

logger = structlog.get_logger()

# auto_error=False: a missing header must be 401, not HTTPBearer's own answer
bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    identifier: str
    role: str


def _deny(code: int, message: str, reason: str) -> HTTPException:
    auth_denials_total.labels(reason=reason).inc()
    return HTTPException(status_code=code, detail=message)


def require_token(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> str:
    """Identifier (sub) of a valid bearer token."""
    if creds is None or not creds.credentials:
        raise _deny(status.HTTP_401_UNAUTHORIZED, "Unauthorized", "missing_token")
    try:
        return decode_token(creds.credentials)
    except JWTError:
        raise _deny(status.HTTP_403_FORBIDDEN, "Forbidden", "invalid_token")


def require_role(role: Role):
    def checker(
        identifier: str = Depends(require_token),
        db: Database = Depends(get_db),
    ) -> Caller:
        # only the verified token subject is trusted here, never the request body
        try:
            stored = UserRepository(db).get_role(identifier)
        except PyMongoError as e:
            logger.error("role_lookup_failed", identifier=identifier, error=str(e))
            raise _deny(status.HTTP_403_FORBIDDEN, "Forbidden", "role_lookup_failed")
        if stored != role.value:
            raise _deny(status.HTTP_403_FORBIDDEN, "Forbidden", "role_mismatch")
        return Caller(identifier=identifier, role=stored)

    checker.__name__ = f"require_{role.value}"
    return checker


require_student = require_role(Role.STUDENT)
require_instructor = require_role(Role.INSTRUCTOR)
require_admin = require_role(Role.ADMIN)
