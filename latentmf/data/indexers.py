"""
Contiguous integer indices for raw user and item identifiers.

Factor tables are addressed by row number, so every raw id seen in the rating
data is assigned the next free row in order of first appearance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable

import numpy as np


@dataclass(frozen=True)
class IndexMapping:
    """Bidirectional mapping between raw ids and factor-table rows."""

    id_to_index: dict[Hashable, int]
    index_to_id: list[Hashable]

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self.index_to_id)

    def __contains__(self, raw_id: object) -> bool:
        return raw_id in self.id_to_index

    def to_index(self, raw_id: Hashable) -> int:
        try:
            return self.id_to_index[raw_id]
        except KeyError as exc:
            raise KeyError(f"Unknown id {raw_id!r}; it does not appear in the rating data") from exc

    def to_id(self, index: int) -> Hashable:
        if not 0 <= index < len(self.index_to_id):
            raise IndexError(f"Row {index} out of bounds for {len(self.index_to_id)} ids")
        return self.index_to_id[index]

    def encode(self, raw_ids: Iterable[Hashable]) -> np.ndarray:
        """Vectorised :meth:`to_index` returning an ``int64`` array."""
        return np.fromiter((self.to_index(raw_id) for raw_id in raw_ids), dtype=np.int64)


def build_index_mapping(values: Iterable[Hashable]) -> IndexMapping:
    """Assign rows to ``values`` in the order each id is first seen."""
    id_to_index: dict[Hashable, int] = {}
    index_to_id: list[Hashable] = []

    for value in values:
        if value not in id_to_index:
            id_to_index[value] = len(index_to_id)
            index_to_id.append(value)

    return IndexMapping(id_to_index=id_to_index, index_to_id=index_to_id)
