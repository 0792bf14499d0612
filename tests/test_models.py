"""Tests for catalog model decoding."""

import pytest
from pydantic import ValidationError

from platify.models.catalog import Product, Recipe, RecipeEnvelope, Section


def test_recipe_decodes_camel_case(sample_recipe):
    recipe = Recipe.model_validate(sample_recipe)

    assert recipe.tags[0].light_color == "#e3f4e8"
    assert recipe.tags[0].dark_color == "#2f7d4f"
    assert recipe.sections[1].video_link == "https://video.test/shakshuka"
    assert [item.name for item in recipe.sections[2].list] == ["Eggs", "Tomatoes"]


def test_nulls_fall_back_to_defaults():
    recipe = Recipe.model_validate(
        {"id": "r-1", "name": "Toast", "description": None, "tags": None, "sections": [{"title": None}]}
    )

    assert recipe.description == ""
    assert recipe.tags == []
    assert recipe.sections == [Section()]


def test_ingredient_quantity_stays_a_string():
    section = Section.model_validate(
        {"ingredients": [{"name": "Flour", "quantity": 200, "unit": "g"}, {"name": "Egg", "quantity": "1-2"}]}
    )

    assert section.ingredients[0].quantity == "200"
    assert section.ingredients[1].quantity == "1-2"


def test_records_are_immutable(sample_product):
    product = Product.model_validate(sample_product)

    with pytest.raises(ValidationError):
        product.name = "Changed"


def test_recipe_requires_identity():
    with pytest.raises(ValidationError):
        RecipeEnvelope.model_validate({"recipe": {"name": "No id"}})
