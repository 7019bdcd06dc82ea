"""Validate allergen lexicon consistency.

Checks:
1. Python sources and JSON mirrors are identical for entries.
2. Every key is lowercase, non-blank and unique within a version.
3. Every key maps to at least one normalized tag.
"""

from __future__ import annotations

import json
import re
import runpy
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
DATA_ROOT = ROOT / "src" / "allergen_lens" / "lexicon" / "data"


def normalize_tag(value: str) -> str:
    text = value.strip().lower()
    _, sep, rest = text.partition(":")
    if sep:
        text = rest
    text = text.replace("-", " ")
    return re.sub(r"\s+", " ", text).strip()


def fail(message: str) -> None:
    print(f"[lexicon-check] ERROR: {message}")
    raise SystemExit(1)


def load_python_constant(path: Path, key: str) -> list[dict]:
    namespace = runpy.run_path(str(path))
    if key not in namespace or not isinstance(namespace[key], list):
        fail(f"Missing or invalid constant '{key}' in {path}")
    return namespace[key]


def load_json(path: Path) -> list[dict]:
    if not path.exists():
        fail(f"Missing JSON file: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        fail(f"JSON file must contain a list: {path}")
    return data


def validate_entries(entries: list[dict], label: str) -> None:
    seen: set[str] = set()
    for entry in entries:
        key = entry.get("key")
        tags = entry.get("tags")
        if not isinstance(key, str) or not key.strip():
            fail(f"{label}: invalid key in entry {entry}")
        if key != key.strip().lower():
            fail(f"{label}: key must be lowercase and trimmed: {key!r}")
        if key in seen:
            fail(f"{label}: duplicate key {key!r}")
        seen.add(key)

        if not isinstance(tags, list) or not tags:
            fail(f"{label}: key {key!r} maps to no tags")
        for tag in tags:
            if not isinstance(tag, str) or normalize_tag(tag) != tag or not tag:
                fail(f"{label}: tag {tag!r} of key {key!r} is not normalized")


def iter_lexicon_versions() -> list[Path]:
    versions: list[Path] = []
    for path in sorted(DATA_ROOT.iterdir()):
        if not path.is_dir():
            continue
        if (path / "entries.py").exists() and (path / "entries.json").exists():
            versions.append(path)
    if not versions:
        fail(f"No lexicon versions found under {DATA_ROOT}")
    return versions


def main() -> int:
    for version_dir in iter_lexicon_versions():
        entries_py = load_python_constant(version_dir / "entries.py", "ENTRIES")
        entries_json = load_json(version_dir / "entries.json")

        if entries_py != entries_json:
            fail(
                f"{version_dir.name}/entries.py and entries.json are out of sync. "
                f"Run mirror update before commit."
            )
        validate_entries(entries_py, version_dir.name)

    print("[lexicon-check] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
