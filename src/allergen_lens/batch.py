"""Batch orchestration with progressive event delivery."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from pydantic import ValidationError

from allergen_lens.exceptions import InvalidBatchError
from allergen_lens.processor import RecipeProcessor
from allergen_lens.schema import (
    BatchEvent,
    BatchRequest,
    CompleteEvent,
    ProgressEvent,
    Recipe,
    RecipeErrorEvent,
    RecipeReport,
    RecipeResultEvent,
)

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    async def emit(self, event: BatchEvent) -> None: ...


class CollectingSink:
    """Keeps emitted events in memory."""

    def __init__(self) -> None:
        self.events: list[BatchEvent] = []

    async def emit(self, event: BatchEvent) -> None:
        self.events.append(event)


def parse_batch(payload: object) -> list[Recipe]:
    """Validate a `{"recipes": [...]}` payload (or a bare list of recipes).

    Raises:
        InvalidBatchError: If the payload does not describe a list of recipes.
    """
    if isinstance(payload, list):
        payload = {"recipes": payload}
    if not isinstance(payload, dict) or "recipes" not in payload:
        raise InvalidBatchError("recipes field is required")
    try:
        return BatchRequest.model_validate({"recipes": payload["recipes"]}).recipes
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidBatchError(f"invalid recipes: {location} {first.get('msg', '')}".strip()) from exc


class BatchOrchestrator:
    """Runs the recipe processor over an ordered batch."""

    def __init__(self, processor: RecipeProcessor):
        self.processor = processor

    async def process_batch(self, recipes: Sequence[Recipe], sink: EventSink) -> list[RecipeReport]:
        """Process recipes in order, emitting events as each one completes.

        Per recipe: PROGRESS, then RECIPE_RESULT (or RECIPE_ERROR when the
        processor fails for that recipe). A single COMPLETE follows with the
        reports that were produced, in input order. Sink failures and
        cancellation abandon the batch.
        """
        total = len(recipes)
        reports: list[RecipeReport] = []

        for index, recipe in enumerate(recipes):
            await sink.emit(ProgressEvent(current=index + 1, total=total))
            try:
                report = await self.processor.process(recipe)
            except Exception as exc:
                logger.exception("recipe %d (%r) failed", index, recipe.recipe_name)
                await sink.emit(
                    RecipeErrorEvent(
                        index=index,
                        recipe_name=recipe.recipe_name,
                        detail=str(exc) or type(exc).__name__,
                    )
                )
                continue
            await sink.emit(RecipeResultEvent(index=index, result=report))
            reports.append(report)

        await sink.emit(CompleteEvent(recipes=reports))
        return reports

    async def process_all(self, recipes: Sequence[Recipe]) -> list[RecipeReport]:
        """Process a whole batch concurrently without emitting events.

        Lookups share one concurrency bound across all recipes.
        """
        semaphore = asyncio.Semaphore(self.processor.max_concurrency)
        return list(await asyncio.gather(*(self.processor.process(recipe, semaphore) for recipe in recipes)))
