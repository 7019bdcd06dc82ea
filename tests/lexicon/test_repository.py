"""Tests for the allergen lexicon."""

import pytest

from allergen_lens.exceptions import LexiconError
from allergen_lens.lexicon import Lexicon, LexiconEntry, LexiconRepository, default_lexicon

CANONICAL_TAGS = {"gluten", "milk", "egg", "fish", "shellfish", "peanuts", "tree nuts", "soy", "sesame"}


def test_default_lexicon_covers_canonical_allergens():
    lexicon = default_lexicon()

    assert CANONICAL_TAGS <= set(lexicon.tags())
    assert lexicon.version == "v1"


def test_default_lexicon_has_no_empty_tag_sets():
    assert all(entry.tags for entry in default_lexicon())


def test_many_keys_share_one_tag():
    keys = {entry.key for entry in default_lexicon().entries_for_tag("gluten")}

    assert {"dough", "flour", "wheat", "pasta"} <= keys


def test_entries_for_tag_normalizes_filter():
    keys = {entry.key for entry in default_lexicon().entries_for_tag("Tree-Nuts")}

    assert "almond" in keys


def test_multi_word_key_is_kept():
    keys = {entry.key for entry in default_lexicon()}

    assert "soy sauce" in keys


def test_from_mapping_lowercases_keys_and_normalizes_tags():
    lexicon = Lexicon.from_mapping({"  Cashew ": ["en:Tree-Nuts"]})

    assert list(lexicon) == [LexiconEntry(key="cashew", tags=frozenset({"tree nuts"}))]


def test_empty_tag_set_is_rejected():
    with pytest.raises(LexiconError):
        Lexicon.from_mapping({"tofu": []})


def test_blank_key_is_rejected():
    with pytest.raises(LexiconError):
        Lexicon.from_mapping({"  ": ["soy"]})


def test_unknown_version_raises():
    with pytest.raises(LexiconError):
        LexiconRepository(version="v999")
