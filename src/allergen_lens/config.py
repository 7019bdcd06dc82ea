"""Environment-driven settings for allergen-lens."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_RESOLVER_URL = "https://world.openfoodfacts.org"
BUSY_POLICIES = ("queue", "reject")
RESOLVERS = ("openfoodfacts", "open_food_facts", "open-food-facts", "none", "offline")


def _safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_origins(value: str | None) -> tuple[str, ...]:
    raw = value if value is not None else "*"
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    lexicon_version: str = "v1"
    resolver: str = "openfoodfacts"  # openfoodfacts|none
    resolver_url: str = DEFAULT_RESOLVER_URL
    resolver_timeout_sec: float = 5.0
    max_concurrency: int = 8
    busy_policy: str = "queue"  # queue|reject
    frontend_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        busy_policy = os.getenv("STREAM_BUSY_POLICY", "queue").strip().lower()
        if busy_policy not in BUSY_POLICIES:
            busy_policy = "queue"
        resolver = os.getenv("ALLERGEN_LENS_RESOLVER", "openfoodfacts").strip().lower()
        if resolver not in RESOLVERS:
            resolver = "openfoodfacts"
        return cls(
            lexicon_version=os.getenv("ALLERGEN_LENS_LEXICON_VERSION", "v1").strip() or "v1",
            resolver=resolver,
            resolver_url=(os.getenv("ALLERGEN_LENS_RESOLVER_URL") or DEFAULT_RESOLVER_URL).rstrip("/"),
            resolver_timeout_sec=max(0.1, _safe_float(os.getenv("ALLERGEN_LENS_RESOLVER_TIMEOUT_SEC"), 5.0)),
            max_concurrency=max(1, _safe_int(os.getenv("ALLERGEN_LENS_MAX_CONCURRENCY"), 8)),
            busy_policy=busy_policy,
            frontend_origins=_parse_origins(os.getenv("FRONTEND_ORIGINS")),
        )
