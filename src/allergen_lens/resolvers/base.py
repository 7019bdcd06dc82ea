"""Base resolver interface."""

from abc import ABC, abstractmethod


class BaseResolver(ABC):
    """Abstract base class for external allergen lookups."""

    @abstractmethod
    async def resolve(self, ingredient: str) -> frozenset[str] | None:
        """Look up allergen tags for an ingredient.

        Args:
            ingredient: Ingredient text the lexicon could not classify.

        Returns:
            Normalized allergen tags, or None when the lookup is unknown.
            Implementations must not raise on lookup failures.
        """
        pass


class NullResolver(BaseResolver):
    """Resolver for offline use; every lookup is unknown."""

    async def resolve(self, ingredient: str) -> frozenset[str] | None:
        return None
