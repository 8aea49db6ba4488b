"""
Route class for paths whose behaviour does not depend on the HTTP method.
"""

from typing import Any, Dict, Tuple

from fastapi.routing import APIRoute
from starlette.routing import Match
from starlette.types import Scope


class AnyMethodRoute(APIRoute):
    """
    APIRoute that answers every HTTP method, including non-standard ones
    (TRACE, PROPFIND, custom verbs).
    
    A plain route that matches the path but not the method is only a partial
    match, and Starlette then answers 405 on its own before any dependency
    (including enforce_access) runs. Here a path match is always a full match,
    so classify() and the auth gate see every request.
    """

    def matches(self, scope: Scope) -> Tuple[Match, Dict[str, Any]]:
        match, child_scope = super().matches(scope)
        if match is Match.PARTIAL:
            return Match.FULL, child_scope
        return match, child_scope
