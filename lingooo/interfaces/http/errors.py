import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from ...infrastructure.metrics import endpoint_label, store_errors_total

logger = structlog.get_logger()

INTERNAL_ERROR = "Internal server error"


def error_body(message) -> dict:
    return {"error": True, "message": message}


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content=error_body(f"Rate limit exceeded: {exc.detail}"))


async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    # store failures not handled by a route still answer with the JSON error body
    endpoint = endpoint_label(request)
    store_errors_total.labels(operation=endpoint).inc()
    logger.error("store_error", method=request.method, endpoint=endpoint, error=str(exc))
    return JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)


def internal_error() -> HTTPException:
    return HTTPException(status_code=500, detail=INTERNAL_ERROR)
