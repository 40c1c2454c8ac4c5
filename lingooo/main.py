import time
import logging
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .config import settings
from .infrastructure.cache import close_redis
from .infrastructure.db import MongoStore
from .infrastructure.metrics import (
    metrics_endpoint,
    endpoint_label,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.payments import PaymentGateway
from .interfaces.http.errors import install_error_handlers
from .interfaces.http.limits import limiter
from .interfaces.http.routers import (
    admin as admin_router,
    auth as auth_router,
    classes as classes_router,
    flags as flags_router,
    instructors as instructors_router,
    payments as payments_router,
    reviews as reviews_router,
    users as users_router,
)

VERSION = "0.1.0"

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Lingooo server", version=VERSION)
    store = MongoStore().open()
    store.ping()
    store.ensure_indexes()
    logger.info("Document store connection established", database=store.database_name)
    app.state.store = store
    app.state.payments = PaymentGateway(settings.PAYMENT_SECRET_KEY)
    try:
        yield
    finally:
        store.close()
        close_redis()
        logger.info("Lingooo server stopped")


app = FastAPI(title="Lingooo API", version=VERSION, lifespan=lifespan)
app.state.limiter = limiter
install_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def observe_requests(request: Request, call_next):
    start_time = time.time()
    method = request.method
    path = request.url.path

    response = await call_next(request)

    if response.headers.get("content-type", "").startswith("application/json"):
        response.headers["content-type"] = "application/json; charset=utf-8"

    duration = time.time() - start_time
    status_code = response.status_code
    endpoint = endpoint_label(request)
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    logger.info(
        "http_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration * 1000, 2)
    )

    return response


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Hello from Lingooo's server"


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    """Prometheus metrics endpoint"""
    return metrics_endpoint()


app.include_router(auth_router.router)
app.include_router(classes_router.router)
app.include_router(instructors_router.router)
app.include_router(flags_router.router)
app.include_router(users_router.router)
app.include_router(reviews_router.router)
app.include_router(payments_router.router)
app.include_router(admin_router.router)


def run():
    uvicorn.run("lingooo.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
