"""Allergen lexicon v1."""

from allergen_lens.lexicon.data.v1.entries import ENTRIES

__all__ = ["ENTRIES"]
