"""Per-recipe allergen aggregation."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

from allergen_lens.schema import Recipe, RecipeReport, ReportMessage
from allergen_lens.service import AllergenResolutionService


@dataclass(frozen=True)
class IngredientFinding:
    ingredient: str
    tags: frozenset[str]

    @property
    def flagged(self) -> bool:
        return bool(self.tags)


def build_report(recipe_name: str, findings: Iterable[IngredientFinding]) -> RecipeReport:
    """Fold ordered findings into a report.

    Allergens keep first-seen order, with each ingredient's tags sorted.
    Duplicate ingredient strings share one flagged entry (last one wins) but
    every unrecognized occurrence is listed.
    """
    allergens: dict[str, None] = {}
    flagged: dict[str, list[str]] = {}
    unrecognized: list[str] = []

    for finding in findings:
        if finding.flagged:
            tags = sorted(finding.tags)
            allergens.update(dict.fromkeys(tags))
            flagged[finding.ingredient] = tags
        else:
            unrecognized.append(finding.ingredient)

    return RecipeReport(
        recipe_name=recipe_name,
        allergens=list(allergens),
        flagged_ingredients=flagged,
        unrecognized_ingredients=unrecognized,
        message=ReportMessage.SOME_UNRECOGNIZED if unrecognized else ReportMessage.ALL_RECOGNIZED,
    )


class RecipeProcessor:
    """Classifies every ingredient of a recipe and aggregates the result."""

    def __init__(self, service: AllergenResolutionService, max_concurrency: int = 8):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.service = service
        self.max_concurrency = max_concurrency

    async def classify_all(
        self,
        recipe: Recipe,
        semaphore: asyncio.Semaphore | None = None,
    ) -> list[IngredientFinding]:
        """Classify ingredients concurrently; findings come back in input order.

        Pass a shared semaphore to bound lookups across several recipes.
        """
        if semaphore is None:
            semaphore = asyncio.Semaphore(self.max_concurrency)

        async def classify_one(ingredient: str) -> IngredientFinding:
            async with semaphore:
                tags = await self.service.classify(ingredient)
            return IngredientFinding(ingredient=ingredient, tags=tags)

        return list(await asyncio.gather(*(classify_one(item) for item in recipe.ingredients)))

    async def process(self, recipe: Recipe, semaphore: asyncio.Semaphore | None = None) -> RecipeReport:
        findings = await self.classify_all(recipe, semaphore)
        return build_report(recipe.recipe_name, findings)
