"""allergen-lens: Detect allergens in recipe ingredients."""

from allergen_lens.batch import BatchOrchestrator, CollectingSink, parse_batch
from allergen_lens.lexicon import Lexicon, default_lexicon
from allergen_lens.matcher import Matcher
from allergen_lens.processor import RecipeProcessor
from allergen_lens.schema import IngredientLookup, Recipe, RecipeReport, ReportMessage
from allergen_lens.service import AllergenResolutionService, build_service

__version__ = "0.1.0"

__all__ = [
    "AllergenResolutionService",
    "BatchOrchestrator",
    "CollectingSink",
    "IngredientLookup",
    "Lexicon",
    "Matcher",
    "Recipe",
    "RecipeProcessor",
    "RecipeReport",
    "ReportMessage",
    "build_service",
    "default_lexicon",
    "parse_batch",
    "__version__",
]
