"""
Error taxonomy for the shortlinks service.

Every error carries the HTTP status and plain-text body it is answered with.
There is no structured error envelope: clients get the body text only.
"""

from typing import Dict, Optional


class ShortlinksError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.headers = headers


class AuthenticationError(ShortlinksError):
    """Missing, malformed or incorrect credentials on an admin path."""

    status_code = 401
    message = "Access Denied"

    def __init__(self, realm: str = "Admin Area"):
        super().__init__(headers={"WWW-Authenticate": f'Basic realm="{realm}"'})
        self.realm = realm


class LinkNotFoundError(ShortlinksError):
    status_code = 404
    message = "404 - Link not found"

    def __init__(self, slug: str):
        super().__init__()
        self.slug = slug


class MissingDataError(ShortlinksError):
    """Required form fields absent or empty."""

    status_code = 400
    message = "Missing data"


class UnroutedRequestError(ShortlinksError):
    status_code = 400
    message = "Bad Request"


class StoreUnavailableError(ShortlinksError):
    """The link store backend failed. Raised in place of driver errors."""

    status_code = 503
    message = "Service Unavailable"

    def __init__(self, operation: str, detail: str = ""):
        super().__init__()
        self.operation = operation
        self.detail = detail

    def __str__(self) -> str:
        return f"store {self.operation} failed: {self.detail}" if self.detail else f"store {self.operation} failed"
