import os
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from shortlinks_app.dependencies import get_link_service
from shortlinks_app.exceptions import MissingDataError
from shortlinks_app.routing.classifier import (
    ADMIN_UI_PATH,
    API_ADD_PATH,
    API_DELETE_PATH,
    API_LIST_PATH,
)
from shortlinks_app.routing.route import AnyMethodRoute
from shortlinks_app.schemas.link import LinkCreate, LinkDelete, LinkResponse
from shortlinks_app.services.link_service import LinkService

router = APIRouter(tags=["admin"])

# /admin and /api/list answer every method; add and delete are POST only
any_method_router = APIRouter(tags=["admin"], route_class=AnyMethodRoute)

template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)


# Access is enforced app-wide (enforce_access) before any of these run.


@any_method_router.api_route(ADMIN_UI_PATH, response_class=HTMLResponse)
async def admin_dashboard(request: Request):
    """Serve the dashboard. Links are loaded by the page itself from /api/list."""
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"hostname": request.url.hostname or ""},
    )


@router.post(API_ADD_PATH, response_class=PlainTextResponse)
async def add_link(
    request: Request,
    link_service: LinkService = Depends(get_link_service)
):
    """Create or overwrite a link from form fields `slug` and `url`"""
    form = await request.form()
    try:
        link = LinkCreate(slug=form.get("slug"), url=form.get("url"))
    except ValidationError:
        raise MissingDataError()
    
    await link_service.add_link(link.slug, link.url)
    return PlainTextResponse("Success")


@router.post(API_DELETE_PATH, response_class=PlainTextResponse)
async def delete_link(
    request: Request,
    link_service: LinkService = Depends(get_link_service)
):
    """Delete the link named by form field `slug`"""
    form = await request.form()
    try:
        link = LinkDelete(slug=form.get("slug"))
    except ValidationError:
        raise MissingDataError()
    
    await link_service.delete_link(link.slug)
    return PlainTextResponse("Deleted")


@any_method_router.api_route(API_LIST_PATH, response_model=List[LinkResponse])
async def list_links(link_service: LinkService = Depends(get_link_service)):
    """All links (first store page) as [{"slug", "url"}]"""
    return await link_service.list_links()


router.include_router(any_method_router)
