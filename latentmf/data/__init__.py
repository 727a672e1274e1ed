"""Rating data access and id indexing."""

from .indexers import IndexMapping, build_index_mapping  # noqa: F401
from .ratings import RatingMatrix, build_rating_matrix, load_ratings  # noqa: F401
