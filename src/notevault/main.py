# Main application entry point
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from redis.exceptions import RedisError

from .api import attachments_router, auth_router, health_router, notes_router, sharing_router
from .config import get_settings
from .core.error_handlers import register_error_handlers
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .core.schemas.common import ErrorResponse
from .database import create_tables
from .middleware.rate_limit import general_rate_limit

settings = get_settings()

# Setup logging first
setup_logging(settings)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate secrets, connect Redis, ensure tables."""
    logger.info(
        "Starting NoteVault application",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )
    settings.require_secrets()

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
    except (RedisError, OSError) as e:
        logger.warning("Redis connection failed, rate limiting disabled", extra={"error": str(e)})

    if settings.environment.lower() != "test":
        await create_tables()
        logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down NoteVault application")
    await redis_client.disconnect()


app = FastAPI(
    title=settings.app_name,
    description="Notes with token sessions and sharing",
    version=settings.app_version,
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

register_error_handlers(app)

api_dependencies = [Depends(general_rate_limit)]
# documents the shared error body in the OpenAPI schema
error_responses = {
    status_code: {"model": ErrorResponse} for status_code in (400, 401, 403, 404, 409, 429)
}
app.include_router(
    auth_router, prefix="/api", dependencies=api_dependencies, responses=error_responses
)
app.include_router(
    notes_router, prefix="/api", dependencies=api_dependencies, responses=error_responses
)
app.include_router(
    sharing_router, prefix="/api", dependencies=api_dependencies, responses=error_responses
)
app.include_router(
    attachments_router, prefix="/api", dependencies=api_dependencies, responses=error_responses
)
app.include_router(health_router, prefix="/api")

if settings.attachment_storage == "local":
    # stored names are random UUIDs, as with public bucket URLs
    app.mount(
        settings.attachment_url_prefix,
        StaticFiles(directory=settings.attachment_dir, check_dir=False),
        name="attachments",
    )


@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notevault.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
