from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI

from shortlinks_app.api import admin, redirect
from shortlinks_app.api.errors import register_exception_handlers
from shortlinks_app.config import get_settings
from shortlinks_app.dependencies import enforce_access
from shortlinks_app.logging_config import setup_logging
from shortlinks_app.middleware.logging import AccessLogMiddleware
from shortlinks_app.store.factory import StoreFactory


logger = logging.getLogger("shortlinks_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings (fails fast without ADMIN_PASSWORD), set up logging, close the store on exit."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(
        f"Starting {settings.app_name} {settings.app_version} "
        f"({settings.environment}, store: {settings.store_backend})"
    )
    yield
    await StoreFactory.close_instance()
    logger.info("Link store closed")


# Create FastAPI app
# Docs are off: every path outside /admin and /api is a redirect lookup.
app = FastAPI(
    title="Shortlinks",
    description="Slug to URL redirects with a password-protected admin area",
    lifespan=lifespan,
    dependencies=[Depends(enforce_access)],
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.add_middleware(AccessLogMiddleware)
register_exception_handlers(app)


######## Include routers
# redirect.router holds the catch-all route and must come last
app.include_router(admin.router)
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
