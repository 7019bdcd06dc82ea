"""Allergen resolution: lexicon first, external resolver on a miss."""

from __future__ import annotations

import httpx

from allergen_lens.config import Settings
from allergen_lens.lexicon import default_lexicon
from allergen_lens.matcher import Matcher
from allergen_lens.resolvers.base import BaseResolver, NullResolver
from allergen_lens.resolvers.open_food_facts import OpenFoodFactsResolver
from allergen_lens.schema import IngredientLookup


class AllergenResolutionService:
    """Single policy point for classifying one ingredient."""

    def __init__(self, matcher: Matcher, resolver: BaseResolver | None = None):
        self.matcher = matcher
        self.resolver = resolver or NullResolver()

    async def classify(self, ingredient: str) -> frozenset[str]:
        """Return the allergen tags of an ingredient.

        The resolver is consulted only when the lexicon finds nothing. An
        unknown resolver result is reported as no allergens.
        """
        tags, _ = await self._classify(ingredient)
        return tags

    async def lookup(self, ingredient: str) -> IngredientLookup:
        """Classify an ingredient and report whether the lexicon knew it."""
        tags, found = await self._classify(ingredient)
        return IngredientLookup(ingredient=ingredient, allergens=sorted(tags), found=found)

    async def _classify(self, ingredient: str) -> tuple[frozenset[str], bool]:
        local = self.matcher.match(ingredient)
        if local:
            return local, True
        if not ingredient.strip():
            return frozenset(), False
        resolved = await self.resolver.resolve(ingredient)
        return resolved or frozenset(), False


def _build_resolver(settings: Settings, client: httpx.AsyncClient | None) -> BaseResolver:
    if settings.resolver in {"none", "offline"}:
        return NullResolver()
    if settings.resolver in {"openfoodfacts", "open_food_facts", "open-food-facts"}:
        return OpenFoodFactsResolver(
            client,
            base_url=settings.resolver_url,
            timeout_sec=settings.resolver_timeout_sec,
        )
    raise ValueError(f"Unsupported resolver: {settings.resolver}")


def build_service(
    settings: Settings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> AllergenResolutionService:
    """Wire lexicon, matcher and resolver from settings."""

    settings = settings or Settings.from_env()
    matcher = Matcher(default_lexicon(settings.lexicon_version))
    return AllergenResolutionService(matcher, _build_resolver(settings, client))
