"""Pydantic models."""

from platify.models.catalog import (
    Direction,
    Ingredient,
    Nutrients,
    NutritionItem,
    Product,
    Recipe,
    RecipeEnvelope,
    Section,
    ShoppingItem,
    Tag,
)
from platify.models.results import (
    FetchFailure,
    FetchResult,
    Found,
    NotFound,
    TransientError,
)

__all__ = [
    "Direction",
    "FetchFailure",
    "FetchResult",
    "Found",
    "Ingredient",
    "NotFound",
    "Nutrients",
    "NutritionItem",
    "Product",
    "Recipe",
    "RecipeEnvelope",
    "Section",
    "ShoppingItem",
    "Tag",
    "TransientError",
]
