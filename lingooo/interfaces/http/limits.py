from slowapi import Limiter
from slowapi.util import get_remote_address
from ...config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    swallow_errors=True,
)

def per_minute() -> str:
    return f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
