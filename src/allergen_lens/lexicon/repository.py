"""Allergen lexicon: immutable substring -> tag lookup."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from importlib import import_module
from importlib.resources import files

from allergen_lens.exceptions import LexiconError
from allergen_lens.schema import normalize_tag


@dataclass(frozen=True)
class LexiconEntry:
    key: str
    tags: frozenset[str]


class Lexicon:
    """Read-only collection of lexicon entries.

    Keys are stored lowercase; tags are normalized. Every entry carries at
    least one tag.
    """

    def __init__(self, entries: Iterable[LexiconEntry], version: str = "custom"):
        self.version = version
        self._entries = tuple(self._validate(entry) for entry in entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]], version: str = "custom") -> Lexicon:
        return cls(
            (LexiconEntry(key=key, tags=frozenset(tags)) for key, tags in mapping.items()),
            version=version,
        )

    @staticmethod
    def _validate(entry: LexiconEntry) -> LexiconEntry:
        key = entry.key.strip().lower()
        if not key:
            raise LexiconError(f"Lexicon key must not be blank: {entry!r}")
        tags = frozenset(normalize_tag(tag) for tag in entry.tags) - {""}
        if not tags:
            raise LexiconError(f"Lexicon key maps to no allergen tags: {entry.key!r}")
        return LexiconEntry(key=key, tags=tags)

    def __iter__(self) -> Iterator[LexiconEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def tags(self) -> list[str]:
        return sorted({tag for entry in self._entries for tag in entry.tags})

    def entries_for_tag(self, tag: str) -> list[LexiconEntry]:
        wanted = normalize_tag(tag)
        return [entry for entry in self._entries if wanted in entry.tags]


class LexiconRepository:
    """Loads lexicon entries from packaged data."""

    def __init__(self, version: str = "v1"):
        self.version = version
        self.lexicon = Lexicon(self._load_entries(), version=version)

    def _load_entries(self) -> list[LexiconEntry]:
        try:
            module = import_module(f"allergen_lens.lexicon.data.{self.version}.entries")
            data = module.ENTRIES
        except ModuleNotFoundError:
            path = files("allergen_lens.lexicon.data").joinpath(self.version, "entries.json")
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise LexiconError(f"Lexicon version not found: {self.version}") from exc
        return [LexiconEntry(key=item["key"], tags=frozenset(item["tags"])) for item in data]


@lru_cache(maxsize=4)
def default_lexicon(version: str = "v1") -> Lexicon:
    return LexiconRepository(version=version).lexicon
