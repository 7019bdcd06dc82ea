"""Shared test doubles for allergen-lens."""

import asyncio

import pytest

from allergen_lens import Lexicon
from allergen_lens.resolvers.base import BaseResolver


class StubResolver(BaseResolver):
    """Returns canned results and records every lookup."""

    def __init__(self, responses=None, delays=None):
        self.responses = responses or {}
        self.delays = delays or {}
        self.calls = []

    async def resolve(self, ingredient):
        self.calls.append(ingredient)
        delay = self.delays.get(ingredient)
        if delay:
            await asyncio.sleep(delay)
        result = self.responses.get(ingredient)
        if isinstance(result, Exception):
            raise result
        return frozenset(result) if result is not None else None


class ForbiddenResolver(BaseResolver):
    """Fails the test when consulted."""

    async def resolve(self, ingredient):
        pytest.fail(f"resolver must not be called for {ingredient!r}")


@pytest.fixture
def pizza_lexicon():
    return Lexicon.from_mapping({"dough": ["gluten"], "mozzarella": ["milk"]})
