"""Name-based lookup of the available factorisation models."""

from __future__ import annotations

from typing import Any, Mapping

from latentmf.core import ConfigurationError, FactorizationConfig
from latentmf.data import RatingMatrix

from .base import MatrixFactorizationRecommender
from .biased_mf import BiasedMFRecommender
from .regsvd import RegSVDRecommender

MODEL_REGISTRY: dict[str, type[MatrixFactorizationRecommender]] = {
    "regsvd": RegSVDRecommender,
    "biasedmf": BiasedMFRecommender,
}


def build_recommender(
    name: str,
    config: FactorizationConfig | Mapping[str, Any],
    ratings: RatingMatrix,
) -> MatrixFactorizationRecommender:
    key = name.lower().replace("_", "").replace("-", "")
    try:
        model_cls = MODEL_REGISTRY[key]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown model '{name}'. Available: {sorted(MODEL_REGISTRY)}",
            details={"model": name},
        ) from exc

    if not isinstance(config, FactorizationConfig):
        config = FactorizationConfig.from_mapping(config)
    return model_cls(config, ratings)
