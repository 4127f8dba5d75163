"""
Sentinel application entry point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sentinel.api.v1.router import api_router
from sentinel.core.config import settings
from sentinel.core.database import close_db, init_db
from sentinel.core.exceptions import SentinelError, error_response
from sentinel.core.logging_config import logger
from sentinel.core.middleware import RequestLoggingMiddleware
from sentinel.modules.repair.session_store import repair_sessions

APP_VERSION = "1.0.0"
PLACEHOLDER_SECRET = "CHANGE_ME"


def validate_critical_config():
    """Refuse to start without a database URL or with placeholder secrets"""
    problems = []
    if not settings.DATABASE_URL:
        problems.append("DATABASE_URL is not set")
    for name in ("SECRET_KEY", "JWT_SECRET_KEY"):
        if getattr(settings, name) in ("", PLACEHOLDER_SECRET):
            problems.append(f"{name} is not set or using default value")

    for problem in problems:
        logger.critical(f"[Startup] {problem}")
    if problems:
        raise RuntimeError(f"Missing critical configuration: {', '.join(problems)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"[Startup] {settings.APP_NAME} {APP_VERSION} ({settings.ENVIRONMENT}, api {settings.API_VERSION})")
    validate_critical_config()
    await init_db()
    await repair_sessions.start_cleanup_task()
    logger.info(f"[Startup] Repair sessions expire after {settings.REPAIR_SESSION_TTL_SECONDS}s idle")

    yield

    logger.info(f"[Shutdown] Stopping {settings.APP_NAME}")
    repair_sessions.stop_cleanup_task()
    repair_sessions.clear()
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Test-case wizard and code analysis/repair workbench",
    version=APP_VERSION,
    lifespan=lifespan,
    redirect_slashes=False,
)

# Middleware runs in reverse order of registration
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID", "X-Response-Time"],
)


@app.exception_handler(SentinelError)
async def sentinel_error_handler(request: Request, exc: SentinelError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=request.url.path)
    else:
        logger.warning(f"[{exc.code}] {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.log_error_with_context(exc, context=request.url.path)
    message = str(exc) if settings.DEBUG else "An error occurred"
    return JSONResponse(status_code=500, content={"detail": "Internal server error", "message": message})


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "repair_sessions": repair_sessions.get_stats(),
    }


@app.get("/", tags=["Root"])
async def root():
    return {"name": settings.APP_NAME, "version": APP_VERSION, "docs": "/docs", "health": "/health"}


app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


def run():
    import uvicorn

    uvicorn.run("sentinel.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=settings.DEBUG)
