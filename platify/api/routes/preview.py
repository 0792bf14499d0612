"""Preview pages rendered from local fixture files.

Only mounted outside release mode; used to work on the page designs
without a running upstream API.
"""

import logging
from pathlib import Path
from typing import Callable

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from platify.api.dependencies import get_page_renderer, get_settings
from platify.config import Settings
from platify.models.catalog import Product, RecipeEnvelope
from platify.models.results import FetchFailure, Found, TransientError
from platify.services.page_renderer import PRODUCT_PAGE, RECIPE_PAGE, PageRenderer

logger = logging.getLogger(__name__)
router = APIRouter(tags=["preview"])

EXAMPLE_RECIPE = "example_recipe.json"
EXAMPLE_PRODUCT = "example_product.json"


def load_fixture(path: Path, decode: Callable[[bytes], object]):
    """Decode a fixture file into the same result type a fetch produces."""
    try:
        payload = path.read_bytes()
    except OSError as e:
        return TransientError(FetchFailure.TRANSPORT, f"could not read {path}: {e}")
    try:
        return Found(decode(payload))
    except ValidationError as e:
        return TransientError(FetchFailure.DECODE, f"could not parse {path}: {e}")


@router.get("/recipes/_example", response_class=HTMLResponse)
async def example_recipe(
    settings: Settings = Depends(get_settings),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> HTMLResponse:
    result = load_fixture(
        settings.testdata_dir / EXAMPLE_RECIPE,
        lambda payload: RecipeEnvelope.model_validate_json(payload).recipe,
    )
    return renderer.render(result, RECIPE_PAGE, resource_id="_example")


@router.get("/products/_example", response_class=HTMLResponse)
async def example_product(
    settings: Settings = Depends(get_settings),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> HTMLResponse:
    result = load_fixture(settings.testdata_dir / EXAMPLE_PRODUCT, Product.model_validate_json)
    return renderer.render(result, PRODUCT_PAGE, resource_id="_example")
