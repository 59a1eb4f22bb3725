# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import auth_router, health_router, notes_router, realtime_router, tags_router
from .config import get_settings
from .core.exceptions import NoteboardError
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .core.schemas.common import ErrorResponse
from .database import create_tables, get_session_factory
from .realtime import CommandDispatcher, HubRegistry

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting Noteboard application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # one hub registry per process, shared by the socket endpoint and HTTP position updates
    app.state.hubs = HubRegistry(settings.broadcast_scope, settings.ws_prune_on_send_failure)
    app.state.dispatcher = CommandDispatcher(
        get_session_factory(), app.state.hubs, max_frame_bytes=settings.ws_max_message_bytes
    )

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    # Tests run against their own SQLite engine
    if os.getenv("NOTEBOARD_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTEBOARD_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info(
        "Shutting down Noteboard application",
        extra={"open_connections": app.state.hubs.connection_count()},
    )
    try:
        await redis_client.disconnect()
        logger.info("Redis connection closed")
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title="Noteboard",
    description="Tagged notes on a shared canvas with live position updates",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NoteboardError)
async def noteboard_error_handler(request: Request, exc: NoteboardError):
    if exc.http_status_code >= 500:
        logger.error("Request failed", extra={"path": request.url.path, "error_code": exc.code}, exc_info=exc)
    body = ErrorResponse(error=exc.code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.http_status_code, content=body.model_dump(mode="json"))


app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(tags_router, prefix="/api")
app.include_router(realtime_router, prefix="/api")
app.include_router(health_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Noteboard API"}


@app.get("/api/")
async def api_root():
    return {
        "message": "Noteboard API",
        "version": __version__,
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc", "openapi_json": "/openapi.json"},
        "endpoints": {
            "authentication": "/api/auth/",
            "notes": "/api/notes/",
            "tags": "/api/tags/",
            "realtime": "/api/ws/notes",
            "health": "/api/health/",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("noteboard.main:app", host=settings.host, port=settings.port, reload=settings.reload)
