"""Map upstream fetch results to HTML responses."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import status
from fastapi.responses import HTMLResponse, PlainTextResponse

from platify.core.request_id import get_request_id
from platify.core.templates import TemplateSet
from platify.models.results import FetchResult, Found, NotFound, TransientError

logger = logging.getLogger(__name__)

ERROR_TEMPLATE = "pages/error.html"
RETRY_MESSAGE = "Please try again later."


@dataclass(frozen=True)
class PageKind:
    """Everything the renderer needs to know about one kind of page."""

    resource: str
    template: str
    context_name: str
    not_found_title: str
    not_found_message: str
    error_title: str
    error_message: str


RECIPE_PAGE = PageKind(
    resource="recipe",
    template="pages/recipe.html",
    context_name="recipe",
    not_found_title="Recipe not found",
    not_found_message="This recipe does not exist or is no longer available.",
    error_title="Could not load recipe",
    error_message=f"The recipe could not be loaded. {RETRY_MESSAGE}",
)

PRODUCT_PAGE = PageKind(
    resource="product",
    template="pages/product.html",
    context_name="product",
    not_found_title="Product not found",
    not_found_message="This product does not exist or is no longer available.",
    error_title="Could not load product",
    error_message=f"The product could not be loaded. {RETRY_MESSAGE}",
)

PRODUCT_LIST_PAGE = PageKind(
    resource="products",
    template="pages/products.html",
    context_name="products",
    not_found_title="Products not found",
    not_found_message="The product catalog is not available.",
    error_title="Could not load products",
    error_message=f"The products could not be loaded. {RETRY_MESSAGE}",
)


class PageRenderer:
    """
    Turn a FetchResult into exactly one complete HTMLResponse.

    Bodies are rendered to a string before the response object is built, so
    a failing template never produces a half-written page: it is logged and
    replaced by the error page.
    """

    def __init__(self, templates: TemplateSet):
        self.templates = templates

    def render(
        self,
        result: FetchResult[Any],
        page: PageKind,
        resource_id: Optional[str] = None,
    ) -> HTMLResponse:
        """
        Render the page for one fetch outcome.

        Args:
            result: Outcome of the upstream fetch
            page: Kind of page being served
            resource_id: Requested identifier, used for logging only

        Returns:
            200 content page, 404 not-found page or 500 error page
        """
        log_extra = {"resource": page.resource, "resource_id": resource_id}

        if isinstance(result, Found):
            return self.render_content(page, result.value, resource_id)

        if isinstance(result, NotFound):
            logger.info(f"{page.resource} not found", extra=log_extra)
            return self.render_error(
                status.HTTP_404_NOT_FOUND, page.not_found_title, page.not_found_message
            )

        if isinstance(result, TransientError):
            logger.error(
                f"Failed to fetch {page.resource}: {result.detail}",
                extra={**log_extra, "cause": result.cause.value},
            )
            return self.render_error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, page.error_title, page.error_message
            )

        raise TypeError(f"Unknown fetch result: {result!r}")

    def render_content(self, page: PageKind, record: Any, resource_id: Optional[str] = None) -> HTMLResponse:
        try:
            body = self.templates.render(page.template, **{page.context_name: record})
        except Exception as e:
            logger.error(
                f"Failed to render {page.template}: {e}",
                extra={"resource": page.resource, "resource_id": resource_id},
                exc_info=True,
            )
            return self.render_error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, page.error_title, page.error_message
            )
        return HTMLResponse(body, status_code=status.HTTP_200_OK)

    def render_page(self, template: str, **context: Any) -> HTMLResponse:
        """Render a page that needs no upstream data (home, editor)."""
        try:
            body = self.templates.render(template, **context)
        except Exception as e:
            logger.error(f"Failed to render {template}: {e}", exc_info=True)
            return self.render_error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Something went wrong",
                f"This page could not be displayed. {RETRY_MESSAGE}",
            )
        return HTMLResponse(body)

    def render_error(self, status_code: int, title: str, message: str):
        """Render the shared error page, falling back to plain text."""
        try:
            body = self.templates.render(
                ERROR_TEMPLATE,
                title=title,
                message=message,
                status_code=status_code,
                request_id=get_request_id(),
            )
        except Exception as e:
            logger.critical(f"Failed to render {ERROR_TEMPLATE}: {e}", exc_info=True)
            return PlainTextResponse(f"{title}\n\n{message}\n", status_code=status_code)
        return HTMLResponse(body, status_code=status_code)
