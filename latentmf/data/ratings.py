"""
Explicit-feedback rating data consumed by the factorisation models.

The training core only needs three things from the data: the number of users,
the number of items, and the mean observed rating. :class:`RatingMatrix` keeps
the observations as parallel coordinate arrays so SGD models can iterate over
them in any order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from loguru import logger

from .indexers import IndexMapping, build_index_mapping

DEFAULT_USER_COLUMN = "user_id"
DEFAULT_ITEM_COLUMN = "item_id"
DEFAULT_RATING_COLUMN = "rating"


@dataclass(frozen=True)
class RatingMatrix:
    """Sparse rating observations in coordinate form."""

    user_indices: np.ndarray
    item_indices: np.ndarray
    ratings: np.ndarray
    users: IndexMapping
    items: IndexMapping

    def __post_init__(self) -> None:
        lengths = {len(self.user_indices), len(self.item_indices), len(self.ratings)}
        if len(lengths) != 1:
            raise ValueError("user_indices, item_indices and ratings must have equal length.")

    @property
    def num_users(self) -> int:
        return len(self.users)

    @property
    def num_items(self) -> int:
        return len(self.items)

    @property
    def num_ratings(self) -> int:
        return int(self.ratings.shape[0])

    def mean(self) -> float:
        if self.num_ratings == 0:
            return 0.0
        return float(self.ratings.mean())


def build_rating_matrix(
    frame: pd.DataFrame,
    *,
    user_col: str = DEFAULT_USER_COLUMN,
    item_col: str = DEFAULT_ITEM_COLUMN,
    rating_col: str = DEFAULT_RATING_COLUMN,
) -> RatingMatrix:
    """
    Convert a long-format ratings frame into a :class:`RatingMatrix`.

    Rows with a missing user, item or rating are dropped with a warning.

    Raises
    ------
    ValueError
        If a required column is absent or no usable rows remain.
    """
    required = {user_col, item_col, rating_col}
    missing = required - set(frame.columns)
    if missing:
        raise ValueError(f"Ratings frame missing required columns: {sorted(missing)}")

    cleaned = frame.dropna(subset=[user_col, item_col, rating_col])
    dropped = len(frame) - len(cleaned)
    if dropped:
        logger.warning("Dropped {} rating rows with missing values", dropped)
    if cleaned.empty:
        raise ValueError("Cannot build a rating matrix from an empty ratings frame.")

    users = build_index_mapping(cleaned[user_col].tolist())
    items = build_index_mapping(cleaned[item_col].tolist())

    matrix = RatingMatrix(
        user_indices=users.encode(cleaned[user_col].tolist()),
        item_indices=items.encode(cleaned[item_col].tolist()),
        ratings=cleaned[rating_col].to_numpy(dtype=np.float64),
        users=users,
        items=items,
    )
    logger.debug(
        "Rating matrix | users={} items={} ratings={} mean={:.4f}",
        matrix.num_users,
        matrix.num_items,
        matrix.num_ratings,
        matrix.mean(),
    )
    return matrix


def load_ratings(
    path: Path | str,
    *,
    user_col: str = DEFAULT_USER_COLUMN,
    item_col: str = DEFAULT_ITEM_COLUMN,
    rating_col: str = DEFAULT_RATING_COLUMN,
    limit: int | None = None,
) -> RatingMatrix:
    """Read a CSV of ratings and build a :class:`RatingMatrix` from it."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Expected ratings CSV at {path} but file was not found.")
    logger.info("Loading ratings from {}", path)
    frame = pd.read_csv(path, nrows=limit)
    return build_rating_matrix(
        frame, user_col=user_col, item_col=item_col, rating_col=rating_col
    )
