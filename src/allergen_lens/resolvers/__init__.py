"""External allergen resolvers for allergen-lens."""

from allergen_lens.resolvers.base import BaseResolver, NullResolver
from allergen_lens.resolvers.open_food_facts import OpenFoodFactsResolver

__all__ = ["BaseResolver", "NullResolver", "OpenFoodFactsResolver"]
