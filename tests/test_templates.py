"""Tests for the compiled template set."""

from types import SimpleNamespace

import pytest

from platify.config import Settings
from platify.core.templates import TemplateSet
from platify.main import create_app
from platify.models.results import Found
from platify.services.page_renderer import RECIPE_PAGE, PageRenderer
from platify.utils.exceptions import TemplateSetError


def test_default_templates_compile():
    templates = TemplateSet(Settings().templates_dir)

    assert {"base.html", "pages/recipe.html", "pages/error.html", "components/section.html"} <= templates.names


def test_render_uses_helpers(tmp_path):
    (tmp_path / "qty.html").write_text("{{ format_qty(q, u) }}|{{ f | format_float }}|{{ inc(i) }}")

    templates = TemplateSet(tmp_path)

    assert templates.render("qty.html", q="2", u="cups", f=3.0, i=0) == "2 cups|3|1"


def test_syntax_error_fails_at_load(tmp_path):
    (tmp_path / "pages").mkdir()
    (tmp_path / "pages" / "broken.html").write_text("{% if %}")

    with pytest.raises(TemplateSetError, match="pages/broken.html"):
        TemplateSet(tmp_path)


def test_missing_directory_fails(tmp_path):
    with pytest.raises(TemplateSetError):
        TemplateSet(tmp_path / "nope")


def test_create_app_fails_on_broken_templates(tmp_path):
    (tmp_path / "bad.html").write_text("{{ unclosed")
    settings = Settings(templates_dir=tmp_path, upload_dir=tmp_path / "uploads")

    with pytest.raises(TemplateSetError):
        create_app(settings)


def test_content_template_failure_renders_error_page(tmp_path):
    (tmp_path / "pages").mkdir()
    (tmp_path / "pages" / "error.html").write_text("{{ title }}: {{ message }}")
    (tmp_path / "pages" / "recipe.html").write_text("{{ recipe.name.upper(1, 2, 3) }}")
    renderer = PageRenderer(TemplateSet(tmp_path))

    response = renderer.render(Found(SimpleNamespace(name="x")), RECIPE_PAGE, resource_id="r-1")

    assert response.status_code == 500
    assert response.body.decode().startswith("Could not load recipe:")
