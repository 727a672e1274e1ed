import pandas as pd
import pytest

from latentmf.data import RatingMatrix, build_rating_matrix


@pytest.fixture
def small_ratings() -> RatingMatrix:
    frame = pd.DataFrame(
        {
            "user_id": ["u1", "u1", "u1", "u2", "u2", "u3", "u3", "u3", "u4", "u4", "u5", "u5"],
            "item_id": ["i1", "i2", "i4", "i1", "i4", "i1", "i2", "i4", "i1", "i4", "i2", "i3"],
            "rating": [5.0, 3.0, 1.0, 4.0, 1.0, 1.0, 1.0, 5.0, 1.0, 4.0, 1.0, 5.0],
        }
    )
    return build_rating_matrix(frame)
