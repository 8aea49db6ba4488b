import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlinks_app.exceptions import ShortlinksError, StoreUnavailableError


logger = logging.getLogger(__name__)


async def shortlinks_error_handler(request: Request, exc: ShortlinksError) -> PlainTextResponse:
    """Answer any ShortlinksError with its status and plain-text body."""
    if isinstance(exc, StoreUnavailableError):
        logger.error(f"{request.method} {request.url.path}: {exc}")
    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=exc.headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Framework-raised HTTP errors get plain-text bodies too, never JSON."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortlinksError, shortlinks_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
