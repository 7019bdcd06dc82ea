"""Packaged allergen lexicon data."""
