"""Tests for batch orchestration and event streaming."""

import asyncio

import pytest

from allergen_lens import (
    AllergenResolutionService,
    BatchOrchestrator,
    CollectingSink,
    Matcher,
    Recipe,
    RecipeProcessor,
    parse_batch,
)
from allergen_lens.channel import ChannelSession
from allergen_lens.exceptions import InvalidBatchError
from allergen_lens.schema import CompleteEvent, ProgressEvent, RecipeErrorEvent, RecipeResultEvent
from conftest import StubResolver


def _orchestrator(lexicon, resolver=None):
    service = AllergenResolutionService(Matcher(lexicon), resolver or StubResolver())
    return BatchOrchestrator(RecipeProcessor(service))


def _recipes():
    return [
        Recipe(recipe_name="Pizza", ingredients=["Dough", "Tomato Sauce", "Mozzarella"]),
        Recipe(recipe_name="Salad", ingredients=["lettuce"]),
        Recipe(recipe_name="Toast", ingredients=["dough"]),
    ]


def test_stream_emits_progress_result_then_complete(pizza_lexicon):
    sink = CollectingSink()

    reports = asyncio.run(_orchestrator(pizza_lexicon).process_batch(_recipes(), sink))

    kinds = [event.type for event in sink.events]
    assert kinds == ["PROGRESS", "RECIPE_RESULT"] * 3 + ["COMPLETE"]
    progress = [event for event in sink.events if isinstance(event, ProgressEvent)]
    assert [(event.current, event.total) for event in progress] == [(1, 3), (2, 3), (3, 3)]
    assert [report.recipe_name for report in reports] == ["Pizza", "Salad", "Toast"]


def test_complete_matches_result_events_index_for_index(pizza_lexicon):
    sink = CollectingSink()

    asyncio.run(_orchestrator(pizza_lexicon).process_batch(_recipes(), sink))

    results = [event for event in sink.events if isinstance(event, RecipeResultEvent)]
    completes = [event for event in sink.events if isinstance(event, CompleteEvent)]
    assert sorted(event.index for event in results) == [0, 1, 2]
    assert len(completes) == 1
    assert sink.events[-1] is completes[0]
    assert len(completes[0].recipes) == 3
    for event in results:
        assert completes[0].recipes[event.index] == event.result


def test_result_is_emitted_before_next_recipe_starts(pizza_lexicon):
    sink = CollectingSink()
    seen_when_resolving = []

    class WatchingResolver(StubResolver):
        async def resolve(self, ingredient):
            seen_when_resolving.append([event.type for event in sink.events])
            return None

    recipes = [Recipe(recipe_name="A", ingredients=["salt"]), Recipe(recipe_name="B", ingredients=["pepper"])]
    asyncio.run(_orchestrator(pizza_lexicon, WatchingResolver()).process_batch(recipes, sink))

    assert seen_when_resolving == [["PROGRESS"], ["PROGRESS", "RECIPE_RESULT", "PROGRESS"]]


def test_empty_batch_emits_only_complete(pizza_lexicon):
    sink = CollectingSink()

    reports = asyncio.run(_orchestrator(pizza_lexicon).process_batch([], sink))

    assert reports == []
    assert [event.type for event in sink.events] == ["COMPLETE"]


def test_failing_recipe_is_isolated(pizza_lexicon):
    resolver = StubResolver({"cursed": RuntimeError("resolver bug")})
    recipes = [
        Recipe(recipe_name="Good", ingredients=["Dough"]),
        Recipe(recipe_name="Bad", ingredients=["cursed"]),
        Recipe(recipe_name="Also good", ingredients=["Mozzarella"]),
    ]
    sink = CollectingSink()

    reports = asyncio.run(_orchestrator(pizza_lexicon, resolver).process_batch(recipes, sink))

    errors = [event for event in sink.events if isinstance(event, RecipeErrorEvent)]
    assert [(event.index, event.recipe_name, event.detail) for event in errors] == [(1, "Bad", "resolver bug")]
    assert [report.recipe_name for report in reports] == ["Good", "Also good"]
    assert [event.type for event in sink.events][-1] == "COMPLETE"


def test_sink_failure_abandons_batch(pizza_lexicon):
    class ClosedSink(CollectingSink):
        async def emit(self, event):
            if isinstance(event, RecipeResultEvent):
                raise RuntimeError("channel closed")
            await super().emit(event)

    sink = ClosedSink()

    with pytest.raises(RuntimeError):
        asyncio.run(_orchestrator(pizza_lexicon).process_batch(_recipes(), sink))

    assert [event.type for event in sink.events] == ["PROGRESS"]


def test_process_all_returns_reports_in_input_order(pizza_lexicon):
    resolver = StubResolver(delays={"Tomato Sauce": 0.05})

    reports = asyncio.run(_orchestrator(pizza_lexicon, resolver).process_all(_recipes()))

    assert [report.recipe_name for report in reports] == ["Pizza", "Salad", "Toast"]
    assert reports[0].unrecognized_ingredients == ["Tomato Sauce"]


def test_parse_batch_accepts_object_and_list():
    payload = [{"recipe_name": " Soup ", "ingredients": ["water", "salt"]}]

    assert parse_batch({"recipes": payload}) == parse_batch(payload)
    assert parse_batch(payload)[0].recipe_name == "Soup"


@pytest.mark.parametrize(
    "payload",
    (
        {},
        {"recipes": "pizza"},
        {"recipes": [{"ingredients": ["flour"]}]},
        {"recipes": [{"recipe_name": "Pie", "ingredients": [1, 2]}]},
        {"recipes": [{"recipe_name": "", "ingredients": []}]},
        "recipes",
    ),
)
def test_parse_batch_rejects_malformed_input(payload):
    with pytest.raises(InvalidBatchError):
        parse_batch(payload)


def test_channel_session_stops_after_send_failure(pizza_lexicon):
    class ClosedSink(CollectingSink):
        async def emit(self, event):
            raise RuntimeError("channel closed")

    async def run():
        session = ChannelSession(_orchestrator(pizza_lexicon), ClosedSink(), busy_policy="queue")
        await session.handle_text('{"type": "PROCESS_RECIPES", "recipes": [{"recipe_name": "Pizza"}]}')
        assert session.in_flight == 1
        await asyncio.wait_for(session.drain(), timeout=1)
        return session

    session = asyncio.run(run())

    assert session.in_flight == 0


def test_process_all_bounds_lookups_across_recipes(pizza_lexicon):
    active = 0
    peak = 0

    class CountingResolver(StubResolver):
        async def resolve(self, ingredient):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.005)
            active -= 1
            return None

    service = AllergenResolutionService(Matcher(pizza_lexicon), CountingResolver())
    orchestrator = BatchOrchestrator(RecipeProcessor(service, max_concurrency=2))
    recipes = [
        Recipe(recipe_name=f"Recipe {n}", ingredients=[f"item {n}-{m}" for m in range(5)]) for n in range(20)
    ]

    reports = asyncio.run(orchestrator.process_all(recipes))

    assert peak == 2
    assert [report.recipe_name for report in reports] == [recipe.recipe_name for recipe in recipes]
    assert all(len(report.unrecognized_ingredients) == 5 for report in reports)
