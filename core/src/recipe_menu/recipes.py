from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

Record = dict[str, Any]


class RecipeCollection(Sequence[Record]):
    """Ordered, read-only view over the recipe records loaded at startup.

    Records are kept exactly as they were decoded so that the page can embed
    them verbatim for the client.
    """

    def __init__(self, records: Sequence[Record]) -> None:
        self._records = tuple(records)

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return RecipeCollection(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RecipeCollection):
            return self._records == other._records
        if isinstance(other, (list, tuple)):
            return list(self._records) == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"RecipeCollection({len(self._records)} recipes)"

    @property
    def names(self) -> list[str]:
        return [str(r.get("name", "")) for r in self._records]

    def to_list(self) -> list[Record]:
        return list(self._records)


def load_recipes(path: Path) -> RecipeCollection:
    """Read the recipe collection from a JSON file holding a top-level array."""

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Invalid recipe collection at {path}: expected a JSON array")
    return RecipeCollection(data)
