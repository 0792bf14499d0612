"""Client for the upstream catalog API."""

import asyncio
import logging
from typing import Callable, List, Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from platify.models.catalog import Product, Recipe, RecipeEnvelope
from platify.models.results import FetchFailure, FetchResult, Found, NotFound, TransientError
from platify.utils.formatting import path_segment

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_S = 10.0

_product_list = TypeAdapter(List[Product])


def _decode_recipe(payload: bytes) -> Recipe:
    return RecipeEnvelope.model_validate_json(payload).recipe


def _decode_product(payload: bytes) -> Product:
    return Product.model_validate_json(payload)


def _decode_products(payload: bytes) -> List[Product]:
    return _product_list.validate_json(payload)


class UpstreamClient:
    """
    Fetch catalog records and reduce each HTTP exchange to a FetchResult.

    The client keeps no state between calls and never retries. Every call is
    bounded by ``timeout`` seconds.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def resource_url(self, collection: str, resource_id: Optional[str] = None) -> str:
        """Compose the URL for a collection or one member of it.

        The id is opaque caller input, so every reserved character (``/``,
        ``?``, ``#``, ``%`` ...) is escaped and it always stays a single path
        segment.
        """
        url = f"{self.base_url}/{collection}"
        if resource_id is not None:
            url += "/" + path_segment(resource_id)
        return url

    async def fetch_recipe(self, recipe_id: str) -> FetchResult[Recipe]:
        return await self._fetch(self.resource_url("recipes", recipe_id), _decode_recipe)

    async def fetch_product(self, product_id: str) -> FetchResult[Product]:
        return await self._fetch(self.resource_url("products", product_id), _decode_product)

    async def fetch_products(self) -> FetchResult[List[Product]]:
        return await self._fetch(self.resource_url("products"), _decode_products)

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport, follow_redirects=True
        ) as client:
            return await client.get(url, headers={"Accept": "application/json"})

    async def _fetch(self, url: str, decode: Callable[[bytes], T]) -> FetchResult[T]:
        try:
            # httpx timeouts apply per phase; wait_for bounds the whole exchange.
            response = await asyncio.wait_for(self._get(url), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            return TransientError(FetchFailure.TIMEOUT, f"GET {url} timed out after {self.timeout}s: {e!r}")
        except httpx.HTTPError as e:
            return TransientError(FetchFailure.TRANSPORT, f"GET {url} failed: {e!r}")

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug(f"Upstream has no resource at {url}")
            return NotFound()
        if response.status_code != httpx.codes.OK:
            return TransientError(
                FetchFailure.UNEXPECTED_STATUS,
                f"GET {url} returned status {response.status_code}",
            )

        try:
            return Found(decode(response.content))
        except ValidationError as e:
            return TransientError(FetchFailure.DECODE, f"GET {url} returned an undecodable body: {e}")
