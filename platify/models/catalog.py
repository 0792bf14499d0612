"""Catalog records decoded from the upstream API.

Every model is frozen: records are built once per request from upstream JSON
and never mutated afterwards. Upstream uses camelCase keys and may send
``null`` for any field; a ``null`` falls back to the field default.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base model for upstream records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Nutrients(CatalogModel):
    """Macro nutrients of one nutrition item or product."""

    energy: float = 0.0
    carbs: float = 0.0
    proteins: float = 0.0
    fats: float = 0.0


class Tag(CatalogModel):
    """Display tag with a light/dark color pair."""

    name: str = ""
    light_color: str = ""
    dark_color: str = ""


class Ingredient(CatalogModel):
    """Single ingredient; quantity is a display string, not a number."""

    name: str = ""
    quantity: str = ""
    unit: str = ""


class Direction(CatalogModel):
    """One preparation step. Steps are numbered by position when rendered."""

    heading: str = ""
    text: str = ""


class NutritionItem(CatalogModel):
    name: str = ""
    thumbnail: str = ""
    quantity: float = 0.0
    unit: str = ""
    nutrients: Nutrients = Field(default_factory=Nutrients)


class ShoppingItem(CatalogModel):
    name: str = ""


class Section(CatalogModel):
    """A titled group of recipe content.

    Any combination of ingredients, nutrition items, directions, video link
    and shopping list may be populated at once.
    """

    title: str = ""
    ingredients: List[Ingredient] = Field(default_factory=list)
    items: List[NutritionItem] = Field(default_factory=list)
    directions: List[Direction] = Field(default_factory=list)
    video_link: str = ""
    list: List[ShoppingItem] = Field(default_factory=list)


class Recipe(CatalogModel):
    id: str
    name: str
    description: str = ""
    image: str = ""
    boards: List[str] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)
    sections: List[Section] = Field(default_factory=list)


class RecipeEnvelope(CatalogModel):
    """Wrapper the upstream recipe endpoint returns: ``{"recipe": {...}}``."""

    recipe: Recipe


class Product(CatalogModel):
    """A single product; structurally one flattened nutrition fact."""

    id: str
    name: str
    thumbnail: str = ""
    unit: str = ""
    nutrients: Nutrients = Field(default_factory=Nutrients)
