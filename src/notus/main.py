# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import (
    account_router,
    admin_router,
    auth_router,
    documents_router,
    dossiers_router,
    health_router,
    notifications_router,
    sharing_router,
)
from .config import get_settings
from .core.errors import NotusError, ValidationError
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables, dispose_engine

setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting Notus application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without invite revocation...")

    # tests run against their own SQLite engine
    if os.getenv("NOTUS_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTUS_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info("Shutting down Notus application")
    await redis_client.disconnect()
    await dispose_engine()


app = FastAPI(
    title="Notus",
    description="Collaborative notes: documents, sharing and access control",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(NotusError)
async def notus_error_handler(request: Request, exc: NotusError):
    """Render typed errors as the failure envelope; details stay in the logs."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"{exc.code} on {request.method} {request.url.path}",
        extra={"status_code": exc.status_code, "detail": exc.detail},
    )
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(
        f"Invalid payload on {request.method} {request.url.path}",
        extra={"errors": len(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": ValidationError.default_message},
    )


app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api")
app.include_router(account_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(sharing_router, prefix="/api")
app.include_router(dossiers_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(health_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Notus API", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notus.main:app", host="0.0.0.0", port=8000, reload=True)
