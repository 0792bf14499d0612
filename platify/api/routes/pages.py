"""Server-rendered catalog pages."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, HTMLResponse, Response

from platify.api.dependencies import get_page_renderer, get_settings, get_upstream_client
from platify.config import Settings
from platify.services.page_renderer import (
    PRODUCT_LIST_PAGE,
    PRODUCT_PAGE,
    RECIPE_PAGE,
    PageRenderer,
)
from platify.services.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
async def home(renderer: PageRenderer = Depends(get_page_renderer)) -> HTMLResponse:
    return renderer.render_page("pages/home.html")


@router.get("/recipes/editor", response_class=HTMLResponse)
async def recipe_editor(renderer: PageRenderer = Depends(get_page_renderer)) -> HTMLResponse:
    """Editor UI; images are sent to the upload API."""
    return renderer.render_page("pages/recipe_editor.html")


@router.get("/recipes/{recipe_id}", response_class=HTMLResponse)
async def recipe_page(
    recipe_id: str,
    client: UpstreamClient = Depends(get_upstream_client),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> HTMLResponse:
    result = await client.fetch_recipe(recipe_id)
    return renderer.render(result, RECIPE_PAGE, resource_id=recipe_id)


@router.get("/products", response_class=HTMLResponse)
async def product_list_page(
    client: UpstreamClient = Depends(get_upstream_client),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> HTMLResponse:
    result = await client.fetch_products()
    return renderer.render(result, PRODUCT_LIST_PAGE)


@router.get("/products/{product_id}", response_class=HTMLResponse)
async def product_page(
    product_id: str,
    client: UpstreamClient = Depends(get_upstream_client),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> HTMLResponse:
    result = await client.fetch_product(product_id)
    return renderer.render(result, PRODUCT_PAGE, resource_id=product_id)


@router.get("/privacy-policy")
async def privacy_policy(
    settings: Settings = Depends(get_settings),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> Response:
    if not settings.privacy_policy_path.is_file():
        logger.warning(f"Privacy policy missing at {settings.privacy_policy_path}")
        return renderer.render_error(
            status.HTTP_404_NOT_FOUND,
            "Page not found",
            "The privacy policy is not available right now.",
        )
    return FileResponse(settings.privacy_policy_path, media_type="text/html")
