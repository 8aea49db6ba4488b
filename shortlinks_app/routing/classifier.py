"""
Request classification.

Every request is mapped to exactly one RequestClass from its method and
path alone. The class decides whether credentials are checked and which
handler answers; nothing here does I/O.
"""

from enum import Enum


ADMIN_UI_PATH = "/admin"
API_PREFIX = "/api"
API_ADD_PATH = "/api/add"
API_DELETE_PATH = "/api/delete"
API_LIST_PATH = "/api/list"


class RequestClass(Enum):
    """Available request classes"""
    PUBLIC_REDIRECT = "public_redirect"
    ADMIN_UI = "admin_ui"
    API_ADD = "api_add"
    API_DELETE = "api_delete"
    API_LIST = "api_list"
    UNMATCHED = "unmatched"

    @property
    def requires_auth(self) -> bool:
        return self is not RequestClass.PUBLIC_REDIRECT


def is_public(path: str) -> bool:
    """True for paths served without credentials (redirect lookups)."""
    return path != ADMIN_UI_PATH and not path.startswith(API_PREFIX)


def classify(method: str, path: str) -> RequestClass:
    """
    Classify a request.
    
    Args:
        method: HTTP method (any case)
        path: URL path, starting with "/"
        
    Returns:
        The single RequestClass the request belongs to
    """
    if is_public(path):
        return RequestClass.PUBLIC_REDIRECT
    if path == ADMIN_UI_PATH:
        return RequestClass.ADMIN_UI
    
    method = method.upper()
    if path == API_ADD_PATH and method == "POST":
        return RequestClass.API_ADD
    if path == API_DELETE_PATH and method == "POST":
        return RequestClass.API_DELETE
    if path == API_LIST_PATH:
        return RequestClass.API_LIST
    return RequestClass.UNMATCHED
