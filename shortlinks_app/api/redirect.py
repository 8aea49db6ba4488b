from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortlinks_app.config import Settings, get_settings
from shortlinks_app.dependencies import get_link_service, get_request_class
from shortlinks_app.exceptions import LinkNotFoundError, UnroutedRequestError
from shortlinks_app.routing.classifier import RequestClass
from shortlinks_app.routing.route import AnyMethodRoute
from shortlinks_app.services.link_service import LinkService

router = APIRouter(tags=["redirect"], route_class=AnyMethodRoute)


@router.api_route("/{slug:path}")
async def redirect_or_reject(
    slug: str,
    request_class: RequestClass = Depends(get_request_class),
    link_service: LinkService = Depends(get_link_service),
    settings: Settings = Depends(get_settings),
):
    """
    Catch-all route, registered last.
    
    Anything that reaches it is either a public redirect lookup or an
    admin-path request no admin route matched (e.g. GET /api/add), which
    is answered 400.
    
    Flow for public paths:
    1. "/" redirects (302) to the fallback URL
    2. Known slug redirects (301) to its destination
    3. Unknown slug is a 404
    """
    if request_class is not RequestClass.PUBLIC_REDIRECT:
        raise UnroutedRequestError()
    
    # slug is the whole path after the leading slash, slashes included
    if not slug:
        return RedirectResponse(url=settings.fallback_url, status_code=status.HTTP_302_FOUND)
    
    destination = await link_service.get_destination(slug)
    if destination is None:
        raise LinkNotFoundError(slug)
    
    return RedirectResponse(url=destination, status_code=status.HTTP_301_MOVED_PERMANENTLY)
