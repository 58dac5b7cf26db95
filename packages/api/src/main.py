# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import settings
from .core.errors import LifecycleError
from .routes import applications, audit, health, leases, payments, reviews
from .schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LeaseDesk API",
    description="Rental application lifecycle: review, payment, conditional approval, and lease signing",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id") or str(uuid.uuid4())


def problem(request: Request, status_code: int, detail: str, kind: str | None = None) -> JSONResponse:
    """RFC 7807 Problem Details response, echoing the caller's request id."""
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = "Error"
    body = ErrorResponse(
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        request_id=_request_id(request),
        kind=kind,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError):
    logger.info("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
    return problem(request, exc.status_code, exc.message, kind=exc.kind)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return problem(request, exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return problem(request, 422, fields, kind="validation_error")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return problem(request, 500, "An unexpected error occurred.")


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(reviews.router, prefix="/api/applications", tags=["reviews"])
app.include_router(payments.router, prefix="/api/applications", tags=["payments"])
app.include_router(leases.router, prefix="/api/applications", tags=["leases"])
app.include_router(audit.router, prefix="/api/audit", tags=["audit"])


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "LeaseDesk API", "version": __version__}
