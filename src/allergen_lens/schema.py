"""Data models for allergen-lens."""

import re
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, StrictStr, StringConstraints

RecipeName = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1)]


def normalize_tag(raw: str) -> str:
    """Normalize an allergen tag: lowercase, no namespace prefix, hyphens as spaces."""
    text = raw.strip().lower()
    _, sep, rest = text.partition(":")
    if sep:
        text = rest
    text = text.replace("-", " ")
    return re.sub(r"\s+", " ", text).strip()


class ReportMessage(str, Enum):
    ALL_RECOGNIZED = "all recognized"
    SOME_UNRECOGNIZED = "some unrecognized"


class Recipe(BaseModel):
    """A recipe as supplied by the caller."""

    recipe_name: RecipeName
    ingredients: list[StrictStr] = Field(default_factory=list)


class RecipeReport(BaseModel):
    """Allergen exposure of a single recipe."""

    recipe_name: str
    allergens: list[str] = Field(default_factory=list)
    flagged_ingredients: dict[str, list[str]] = Field(default_factory=dict)
    unrecognized_ingredients: list[str] = Field(default_factory=list)
    message: ReportMessage = ReportMessage.ALL_RECOGNIZED


class IngredientLookup(BaseModel):
    """Result of checking a single ingredient."""

    ingredient: str
    allergens: list[str] = Field(default_factory=list)
    found: bool = False


class BatchRequest(BaseModel):
    recipes: list[Recipe]


class BatchResponse(BaseModel):
    recipes: list[RecipeReport]


class ProcessRecipesCommand(BaseModel):
    """Inbound streaming command."""

    type: Literal["PROCESS_RECIPES"] = "PROCESS_RECIPES"
    recipes: list[Recipe]


class ProgressEvent(BaseModel):
    type: Literal["PROGRESS"] = "PROGRESS"
    current: int = Field(ge=1)
    total: int = Field(ge=0)


class RecipeResultEvent(BaseModel):
    type: Literal["RECIPE_RESULT"] = "RECIPE_RESULT"
    index: int = Field(ge=0)
    result: RecipeReport


class RecipeErrorEvent(BaseModel):
    type: Literal["RECIPE_ERROR"] = "RECIPE_ERROR"
    index: int = Field(ge=0)
    recipe_name: str
    detail: str


class CompleteEvent(BaseModel):
    type: Literal["COMPLETE"] = "COMPLETE"
    recipes: list[RecipeReport]


class ErrorEvent(BaseModel):
    type: Literal["ERROR"] = "ERROR"
    detail: str


BatchEvent = ProgressEvent | RecipeResultEvent | RecipeErrorEvent | CompleteEvent | ErrorEvent
