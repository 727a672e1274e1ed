"""SGD matrix-factorisation models built on the training core."""

from .base import MatrixFactorizationRecommender  # noqa: F401
from .biased_mf import BiasedMFRecommender  # noqa: F401
from .regsvd import RegSVDRecommender  # noqa: F401
from .registry import MODEL_REGISTRY, build_recommender  # noqa: F401
