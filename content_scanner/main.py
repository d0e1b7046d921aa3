import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from content_scanner.config import settings

# Set up logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

from content_scanner.api import scan, system, text  # noqa: E402
from content_scanner.core.rate_limiter import enforce_rate_limit  # noqa: E402
from content_scanner.integrations import http_client, redis_client  # noqa: E402

# Error codes for HTTP errors raised without a structured detail
STATUS_CODES = {
    400: "INVALID_INPUT",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "FILE_TOO_LARGE",
    422: "FETCH_FAILED",
    429: "RATE_LIMITED",
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
    "Access-Control-Allow-Headers": "*",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await http_client.initialize()
    redis_client.initialize()
    logger.info("[STARTUP] Scanner ready")
    yield
    await http_client.close()
    redis_client.shutdown()
    logger.info("[SHUTDOWN] Scanner stopped")


app = FastAPI(title="AI Content Scanner API", lifespan=lifespan)


def error_response(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    merged = dict(headers or {})
    # Error responses skip the CORS middleware path; the browser needs these to read the body.
    merged.update(CORS_HEADERS)
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": {"code": code, "message": message}},
        headers=merged,
    )


# ---- Global Exception Handlers ({ok: false, error: {code, message}}) ----
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "code" in detail:
        code, message = detail["code"], detail.get("message", "")
    else:
        code = STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        message = str(detail)

    logger.info(f"[ERROR HANDLER] Returning {exc.status_code} {code} for {request.url.path}")
    return error_response(exc.status_code, code, message, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid request body: {field or 'body'} - {first.get('msg', 'invalid value')}"
    return error_response(400, "INVALID_INPUT", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[ERROR HANDLER] Unhandled error on {request.url.path}: {exc}")
    return error_response(500, "INTERNAL_ERROR", "Internal server error.")


# ---- CORS ----
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# ---- Routers ----
app.include_router(system.router)
app.include_router(scan.router, prefix="/api", dependencies=[Depends(enforce_rate_limit)])
app.include_router(text.router, prefix="/api", dependencies=[Depends(enforce_rate_limit)])
