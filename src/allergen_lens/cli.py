"""Command-line interface for allergen-lens."""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from allergen_lens import __version__
from allergen_lens.batch import BatchOrchestrator, parse_batch
from allergen_lens.config import Settings
from allergen_lens.exceptions import AllergenLensError, InvalidBatchError
from allergen_lens.processor import RecipeProcessor
from allergen_lens.schema import BatchEvent, ProgressEvent, RecipeErrorEvent, RecipeReport
from allergen_lens.service import build_service


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="allergen-lens",
        description="Detect allergens in recipe ingredients",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"allergen-lens {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check a single ingredient")
    check.add_argument("ingredient", help="Ingredient text, e.g. 'fresh mozzarella'")

    process = subparsers.add_parser("process", help="Process a JSON file of recipes")
    process.add_argument("file", help='Path to JSON file: {"recipes": [{"recipe_name", "ingredients"}]}')

    for sub in (check, process):
        sub.add_argument("--json", action="store_true", help="Output as JSON")
        sub.add_argument("--offline", action="store_true", help="Skip the OpenFoodFacts fallback")
        sub.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    settings = Settings.from_env()
    if args.offline:
        settings = replace(settings, resolver="none")

    try:
        if args.command == "check":
            return asyncio.run(_check(args.ingredient, settings, as_json=args.json))
        return asyncio.run(_process(Path(args.file), settings, as_json=args.json))
    except AllergenLensError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


async def _check(ingredient: str, settings: Settings, *, as_json: bool) -> int:
    service = build_service(settings)
    result = await service.lookup(ingredient)
    if as_json:
        print(result.model_dump_json(indent=2))
        return 0

    print()
    print(f"  {'Ingredient:':<14} {result.ingredient}")
    print(f"  {'Allergens:':<14} {_format_list(result.allergens) or '-'}")
    print(f"  {'In lexicon:':<14} {'yes' if result.found else 'no'}")
    print()
    return 0


async def _process(path: Path, settings: Settings, *, as_json: bool) -> int:
    recipes = parse_batch(_load_json(path))
    orchestrator = BatchOrchestrator(RecipeProcessor(build_service(settings), settings.max_concurrency))
    sink = _ProgressPrinter(enabled=not as_json)
    reports = await orchestrator.process_batch(recipes, sink)

    if as_json:
        print(json.dumps({"recipes": [report.model_dump(mode="json") for report in reports]}, indent=2))
    else:
        for report in reports:
            _print_report(report)
    return 0


def _load_json(path: Path) -> object:
    if not path.exists():
        raise InvalidBatchError(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise InvalidBatchError(f"Invalid JSON in {path}: {e}") from e


class _ProgressPrinter:
    """Event sink that reports progress on stderr."""

    def __init__(self, enabled: bool):
        self.enabled = enabled

    async def emit(self, event: BatchEvent) -> None:
        if not self.enabled:
            return
        if isinstance(event, ProgressEvent):
            print(f"[{event.current}/{event.total}] processing...", file=sys.stderr)
        elif isinstance(event, RecipeErrorEvent):
            print(f"[{event.index + 1}] {event.recipe_name}: failed ({event.detail})", file=sys.stderr)


def _print_report(report: RecipeReport) -> None:
    """Print report in human-readable format."""
    print()
    print(f"  {report.recipe_name}")
    print()
    fields = [
        ("Allergens", _format_list(report.allergens)),
        ("Unrecognized", _format_list(report.unrecognized_ingredients)),
        ("Status", report.message.value),
    ]
    for label, value in fields:
        display = value if value else "-"
        print(f"  {label + ':':<14} {display}")
    for ingredient, tags in report.flagged_ingredients.items():
        print(f"    - {ingredient}: {', '.join(tags)}")
    print()


def _format_list(items: list[str]) -> str | None:
    """Format list as comma-separated string."""
    if not items:
        return None
    return ", ".join(items)


if __name__ == "__main__":
    sys.exit(main())
