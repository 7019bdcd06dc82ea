"""Lexicon substring matcher."""

from allergen_lens.lexicon import Lexicon


class Matcher:
    """Classifies an ingredient by lexicon substring inclusion.

    Matching is not whole-word: "mozzarella" matches inside
    "fresh mozzarella cheese". Tags from all matching keys are unioned.
    """

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def match(self, ingredient: str) -> frozenset[str]:
        text = ingredient.lower()
        found: set[str] = set()
        for entry in self.lexicon:
            if entry.key in text:
                found |= entry.tags
        return frozenset(found)
