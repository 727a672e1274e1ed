"""
Latent factor tables and the dot-product predictor.

Each training run owns one :class:`FactorPair`: a user table and an item table
sharing the same latent width. Tables are plain ``torch.Tensor`` objects so SGD
steps can write rows in place; the pair only adds shape bookkeeping, bounds
checks and the inner-product primitive on top.
"""

from __future__ import annotations

from dataclasses import dataclass

import torch
from torch import nn

from .exceptions import ConfigurationError


@dataclass
class FactorPair:
    """User-side and item-side latent factor tables for one training run."""

    user_factors: torch.Tensor
    item_factors: torch.Tensor

    def __post_init__(self) -> None:
        if self.user_factors.dim() != 2 or self.item_factors.dim() != 2:
            raise ValueError("Factor tables must be two-dimensional.")
        if self.user_factors.shape[1] != self.item_factors.shape[1]:
            raise ValueError(
                "User and item factor tables must share the latent dimension, got "
                f"{self.user_factors.shape[1]} and {self.item_factors.shape[1]}."
            )

    @property
    def num_users(self) -> int:
        return int(self.user_factors.shape[0])

    @property
    def num_items(self) -> int:
        return int(self.item_factors.shape[0])

    @property
    def num_factors(self) -> int:
        return int(self.user_factors.shape[1])

    def predict(self, user_idx: int, item_idx: int) -> float:
        """
        Return the inner product of user row ``user_idx`` and item row ``item_idx``.

        No bias or clamping is applied; callers that need a bounded or biased
        rating post-process this value.
        """
        user_row = _row(self.user_factors, user_idx, "user")
        item_row = _row(self.item_factors, item_idx, "item")
        return float(torch.dot(user_row, item_row))

    def is_finite(self) -> bool:
        return bool(
            torch.isfinite(self.user_factors).all() and torch.isfinite(self.item_factors).all()
        )


def _row(table: torch.Tensor, index: int, side: str) -> torch.Tensor:
    # Negative indices would silently wrap in torch; treat them as out of range.
    if not 0 <= index < table.shape[0]:
        raise IndexError(
            f"{side} index {index} out of range for {table.shape[0]} {side}s"
        )
    return table[index]


def init_factor_table(
    num_rows: int,
    num_factors: int,
    *,
    init_mean: float,
    init_std: float,
    generator: torch.Generator | None = None,
    dtype: torch.dtype = torch.float32,
) -> torch.Tensor:
    """Allocate a ``num_rows x num_factors`` table drawn from Normal(init_mean, init_std)."""
    table = torch.empty((num_rows, num_factors), dtype=dtype)
    if generator is None:
        nn.init.normal_(table, mean=init_mean, std=init_std)
    else:
        table.normal_(mean=init_mean, std=init_std, generator=generator)
    return table


def setup_factors(
    num_users: int,
    num_items: int,
    num_factors: int,
    init_mean: float = 0.0,
    init_std: float = 0.1,
    *,
    generator: torch.Generator | None = None,
    dtype: torch.dtype = torch.float32,
) -> FactorPair:
    """
    Allocate and initialise the factor tables for a new training run.

    Raises
    ------
    ConfigurationError
        If any of the counts is non-positive or ``init_std`` is negative.
    """
    counts = {"num_users": num_users, "num_items": num_items, "num_factors": num_factors}
    invalid = {name: value for name, value in counts.items() if value <= 0}
    if invalid:
        names = ", ".join(f"{name}={value}" for name, value in invalid.items())
        raise ConfigurationError(f"Factor table sizes must be positive: {names}", details=invalid)
    if init_std < 0:
        raise ConfigurationError(
            f"init_std must be non-negative, got {init_std}", details={"init_std": init_std}
        )

    return FactorPair(
        user_factors=init_factor_table(
            num_users,
            num_factors,
            init_mean=init_mean,
            init_std=init_std,
            generator=generator,
            dtype=dtype,
        ),
        item_factors=init_factor_table(
            num_items,
            num_factors,
            init_mean=init_mean,
            init_std=init_std,
            generator=generator,
            dtype=dtype,
        ),
    )
