"""
FastAPI dependencies for dependency injection.

This module wires settings, the link store, the auth gate and the link
service into routes, and enforces admin access for every request.

Tests override get_settings / get_store via app.dependency_overrides.
"""

import logging

from fastapi import Depends, Request

from shortlinks_app.auth.gate import AuthGate
from shortlinks_app.config import Settings, get_settings
from shortlinks_app.exceptions import AuthenticationError
from shortlinks_app.routing.classifier import RequestClass, classify
from shortlinks_app.store.factory import StoreFactory, StoreBackend
from shortlinks_app.store.strategies import LinkStore


logger = logging.getLogger(__name__)


def get_store(settings: Settings = Depends(get_settings)) -> LinkStore:
    """
    Get link store instance (singleton via StoreFactory).
    
    Returns:
        LinkStore instance based on settings
    """
    backend = StoreBackend(settings.store_backend)
    return StoreFactory.create(backend, settings)


def get_auth_gate(settings: Settings = Depends(get_settings)) -> AuthGate:
    return AuthGate.from_settings(settings)


def get_request_class(request: Request) -> RequestClass:
    """Classify the current request (cached per request by FastAPI)."""
    return classify(request.method, request.url.path)


async def enforce_access(
    request: Request,
    request_class: RequestClass = Depends(get_request_class),
    gate: AuthGate = Depends(get_auth_gate),
) -> None:
    """
    App-wide dependency: runs before every route.
    
    Public redirects pass straight through. Every other class needs valid
    admin credentials; on failure the request ends here with a 401 and no
    handler (or form parsing) runs.
    """
    if not request_class.requires_auth:
        return
    
    result = gate.authenticate(request.headers.get("authorization"))
    if not result.authenticated:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(
            f"Access denied: {request.method} {request.url.path} "
            f"from {client_ip} ({result.reason})"
        )
        raise AuthenticationError(realm=gate.realm)


def get_link_service(
    store: LinkStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Get LinkService with its store injected.
    
    Controllers depend on the service, the service depends on the store.
    """
    from shortlinks_app.services.link_service import LinkService
    return LinkService(store=store, list_limit=settings.store_list_limit)
