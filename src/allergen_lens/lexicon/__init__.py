"""Allergen lexicon for allergen-lens."""

from allergen_lens.lexicon.repository import Lexicon, LexiconEntry, LexiconRepository, default_lexicon

__all__ = [
    "Lexicon",
    "LexiconEntry",
    "LexiconRepository",
    "default_lexicon",
]
