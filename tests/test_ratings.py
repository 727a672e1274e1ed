from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from latentmf.data import build_rating_matrix, load_ratings


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "user_id": ["a", "a", "b", "c", None],
            "item_id": ["x", "y", "x", "z", "x"],
            "rating": [4.0, 2.0, 5.0, 1.0, 3.0],
        }
    )


def test_build_rating_matrix_indexes_users_and_items():
    matrix = build_rating_matrix(_frame())

    assert matrix.num_users == 3
    assert matrix.num_items == 3
    assert matrix.num_ratings == 4
    assert matrix.user_indices.tolist() == [0, 0, 1, 2]
    assert matrix.item_indices.tolist() == [0, 1, 0, 2]
    assert matrix.users.to_id(1) == "b"


def test_mean_ignores_dropped_rows():
    matrix = build_rating_matrix(_frame())

    assert matrix.mean() == pytest.approx(3.0)


def test_custom_column_names():
    frame = pd.DataFrame({"uid": [1, 2], "iid": [7, 7], "score": [1.5, 2.5]})

    matrix = build_rating_matrix(frame, user_col="uid", item_col="iid", rating_col="score")

    assert matrix.num_items == 1
    assert matrix.ratings.dtype == np.float64


def test_missing_columns_raise():
    with pytest.raises(ValueError, match="missing required columns"):
        build_rating_matrix(pd.DataFrame({"user_id": [1], "item_id": [2]}))


def test_empty_frame_raises():
    frame = pd.DataFrame({"user_id": [None], "item_id": [1], "rating": [3.0]})

    with pytest.raises(ValueError):
        build_rating_matrix(frame)


def test_load_ratings_from_csv(tmp_path: Path):
    csv_path = tmp_path / "ratings.csv"
    csv_path.write_text("user_id,item_id,rating\nu1,i1,5\nu2,i1,3\nu2,i2,4\n", encoding="utf-8")

    matrix = load_ratings(csv_path)

    assert (matrix.num_users, matrix.num_items, matrix.num_ratings) == (2, 2, 3)
    assert matrix.mean() == pytest.approx(4.0)


def test_load_ratings_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_ratings(tmp_path / "absent.csv")
