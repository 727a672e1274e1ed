"""
Validated hyper-parameters for a single factorisation training run.

All lookups into the nested YAML mapping happen here, once, so the rest of the
core only ever sees a frozen, checked struct.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from latentmf.utils import get_by_dotted_path

from .exceptions import ConfigurationError

DEFAULT_LEARN_RATE = 0.01
DEFAULT_MAX_LEARN_RATE = 1000.0
DEFAULT_REGULARIZATION = 0.01
DEFAULT_NUM_FACTORS = 10
DEFAULT_INIT_MEAN = 0.0
DEFAULT_INIT_STD = 0.1
DEFAULT_DECAY = 1.0


@dataclass(frozen=True)
class FactorizationConfig:
    """Immutable training configuration; build it with :meth:`from_mapping`."""

    num_iterations: int
    learn_rate: float = DEFAULT_LEARN_RATE
    max_learn_rate: float = DEFAULT_MAX_LEARN_RATE
    reg_user: float = DEFAULT_REGULARIZATION
    reg_item: float = DEFAULT_REGULARIZATION
    reg_bias: float = DEFAULT_REGULARIZATION
    num_factors: int = DEFAULT_NUM_FACTORS
    init_mean: float = DEFAULT_INIT_MEAN
    init_std: float = DEFAULT_INIT_STD
    bold_driver: bool = False
    decay: float = DEFAULT_DECAY
    verbose: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.num_iterations <= 0:
            raise ConfigurationError(
                f"num_iterations must be positive, got {self.num_iterations}",
                details={"num_iterations": self.num_iterations},
            )
        if self.num_factors <= 0:
            raise ConfigurationError(
                f"num_factors must be positive, got {self.num_factors}",
                details={"num_factors": self.num_factors},
            )
        for name in ("reg_user", "reg_item", "reg_bias", "init_std", "decay"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(
                    f"{name} must be a finite non-negative number, got {value}",
                    details={name: value},
                )
        for name in ("learn_rate", "max_learn_rate", "init_mean"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(
                    f"{name} must be finite, got {value}", details={name: value}
                )

    @property
    def decay_enabled(self) -> bool:
        return 0.0 < self.decay < 1.0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "FactorizationConfig":
        """
        Build a config from the nested ``training`` / ``model`` sections.

        ``training.num_iterations`` is mandatory; every other key falls back to
        the module-level defaults.
        """
        if get_by_dotted_path(config, "training.num_iterations") is None:
            raise ConfigurationError(
                "training.num_iterations is required (hard cap on the number of epochs)"
            )

        def read(key: str, default: Any, cast: Any) -> Any:
            raw = get_by_dotted_path(config, key, default)
            if raw is None:
                return None
            try:
                return cast(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"Invalid value for {key}: {raw!r}", details={"key": key, "value": raw}
                ) from exc

        return cls(
            num_iterations=read("training.num_iterations", None, int),
            learn_rate=read("training.learn_rate", DEFAULT_LEARN_RATE, float),
            max_learn_rate=read("training.max_learn_rate", DEFAULT_MAX_LEARN_RATE, float),
            bold_driver=read("training.bold_driver", False, _as_bool),
            decay=read("training.decay", DEFAULT_DECAY, float),
            verbose=read("training.verbose", False, _as_bool),
            seed=read("training.seed", None, int),
            num_factors=read("model.num_factors", DEFAULT_NUM_FACTORS, int),
            reg_user=read("model.reg_user", DEFAULT_REGULARIZATION, float),
            reg_item=read("model.reg_item", DEFAULT_REGULARIZATION, float),
            reg_bias=read("model.reg_bias", DEFAULT_REGULARIZATION, float),
            init_mean=read("model.init_mean", DEFAULT_INIT_MEAN, float),
            init_std=read("model.init_std", DEFAULT_INIT_STD, float),
        )


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
        raise ValueError(f"Cannot interpret {value!r} as a boolean")
    if isinstance(value, (int, float)):
        return bool(value)
    raise TypeError(f"Cannot interpret {type(value).__name__} as a boolean")
