"""Custom exceptions for allergen-lens."""


class AllergenLensError(Exception):
    """Base exception for allergen-lens."""

    pass


class LexiconError(AllergenLensError):
    """Raised when lexicon data is missing or inconsistent."""

    pass


class InvalidBatchError(AllergenLensError):
    """Raised when a batch of recipes cannot be accepted for processing."""

    pass
