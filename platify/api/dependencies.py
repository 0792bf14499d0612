"""Shared API dependencies.

Services are built once in ``create_app`` and kept on ``app.state``; these
accessors hand the shared instances to route handlers.
"""

from fastapi import Request

from platify.config import Settings
from platify.services.image_ingestor import ImageIngestor
from platify.services.page_renderer import PageRenderer
from platify.services.upstream_client import UpstreamClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream_client(request: Request) -> UpstreamClient:
    return request.app.state.upstream_client


def get_page_renderer(request: Request) -> PageRenderer:
    return request.app.state.page_renderer


def get_image_ingestor(request: Request) -> ImageIngestor:
    return request.app.state.image_ingestor
