"""Compiled template set shared by every request."""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from platify.utils.exceptions import TemplateSetError
from platify.utils.formatting import format_float, format_qty, inc, path_segment

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".html"

HELPERS = MappingProxyType(
    {
        "format_qty": format_qty,
        "format_float": format_float,
        "inc": inc,
        "path_segment": path_segment,
    }
)


class TemplateSet:
    """Every ``.html`` file under a directory, compiled once at startup.

    Templates are addressed by their path relative to the root directory,
    e.g. ``pages/recipe.html``. The set is read-only after construction and
    can be shared across concurrent requests.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._env = Environment(
            loader=FileSystemLoader(str(self.directory)),
            autoescape=select_autoescape(["html"]),
            auto_reload=False,
            cache_size=-1,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.globals.update(HELPERS)
        self._env.filters.update(HELPERS)
        self._templates: Mapping[str, Template] = MappingProxyType(self._compile_all())

    def _compile_all(self) -> dict:
        if not self.directory.is_dir():
            raise TemplateSetError(f"template directory not found: {self.directory}")

        templates = {}
        for path in sorted(self.directory.rglob(f"*{TEMPLATE_SUFFIX}")):
            name = path.relative_to(self.directory).as_posix()
            try:
                templates[name] = self._env.get_template(name)
            except TemplateError as e:
                raise TemplateSetError(f"parsing {name}: {e}") from e

        logger.info(
            f"Loaded {len(templates)} templates",
            extra={"templates_dir": str(self.directory)},
        )
        return templates

    @property
    def names(self) -> frozenset:
        return frozenset(self._templates)

    def render(self, name: str, **context: Any) -> str:
        """
        Render a template to a complete string.

        Raises:
            KeyError: If no template with that name was compiled
            jinja2.TemplateError: If rendering fails
        """
        return self._templates[name].render(**context)
