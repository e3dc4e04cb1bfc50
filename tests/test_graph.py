"""
距離モデルのテスト
"""

import numpy as np
import pytest

from aco_tour.core.airport import AirportRecord
from aco_tour.core.graph import (
    DistanceModel,
    haversine_km,
    haversine_matrix,
    parse_exception_pairs,
)
from aco_tour.parser import decode_line


def _dms(degrees, minutes, seconds):
    return degrees + minutes / 60 + seconds / 3600


class TestHaversine:
    """大圏距離のテスト"""

    def test_reference_distance(self):
        """Land's End → John o' Groats"""
        distance = haversine_km(
            _dms(50, 3, 59), -_dms(5, 42, 53), _dms(58, 38, 38), -_dms(3, 4, 12)
        )
        assert 968.85 <= distance <= 968.94

    def test_same_point(self):
        assert haversine_km(33.9, -118.4, 33.9, -118.4) == 0.0

    def test_matrix_matches_scalar(self):
        lats = [33.94, 47.45, 39.86, 40.64]
        lons = [-118.41, -122.31, -104.67, -73.78]
        matrix = haversine_matrix(lats, lons)
        assert matrix[0, 3] == pytest.approx(
            haversine_km(lats[0], lons[0], lats[3], lons[3]), rel=1e-9
        )

    def test_matrix_symmetry(self):
        """dist(i, j) == dist(j, i)、dist(i, i) == 0（厳密）"""
        rng = np.random.default_rng(42)
        lats = rng.uniform(-89, 89, size=25)
        lons = rng.uniform(-179, 179, size=25)
        matrix = haversine_matrix(lats, lons)
        assert np.array_equal(matrix, matrix.T)
        assert np.all(np.diag(matrix) == 0.0)
        assert np.all(matrix >= 0.0)


class TestDistanceModel:
    """DistanceModelクラスのテスト"""

    @pytest.fixture
    def airports(self, sample_lines):
        return [decode_line(line).record for line in sample_lines]

    def test_from_airports(self, airports):
        model = DistanceModel.from_airports(airports)
        assert len(model) == 4
        assert model.labels == ["KLAX", "KSEA", "KDEN", "KJFK"]
        assert model.distance(0, 1) == pytest.approx(1537.05, abs=0.01)
        assert model.distance(0, 1) == model.distance(1, 0)
        assert model.edge_count() == 6
        assert model.is_connected()

    def test_matrix_is_read_only(self, airports):
        model = DistanceModel.from_airports(airports)
        with pytest.raises(ValueError):
            model.matrix[0, 1] = 1.0

    def test_min_distance(self, airports):
        """閾値未満のエッジは通行不可"""
        model = DistanceModel.from_airports(airports, min_distance=1500.0)
        # KLAX-KDEN (約1386km) と KSEA-KDEN (約1645km)
        assert not model.is_admissible(0, 2)
        assert model.is_admissible(1, 2)
        assert model.is_admissible(2, 1)
        assert not model.is_admissible(0, 0)

    def test_exception_pairs(self, airports):
        """例外ペアは閾値未満でも通行可能（順序は問わない）"""
        model = DistanceModel.from_airports(
            airports, min_distance=1500.0, exceptions=["KDEN-KLAX"]
        )
        assert model.is_admissible(0, 2)
        assert model.is_admissible(2, 0)

    def test_isolated_nodes(self):
        """閾値が大きすぎると孤立ノードが生じる"""
        airports = [
            AirportRecord.from_decimal("AAAA", 0.0, 0.0),
            AirportRecord.from_decimal("BBBB", 0.0, 1.0),
            AirportRecord.from_decimal("CCCC", 0.0, 30.0),
        ]
        model = DistanceModel.from_airports(airports, min_distance=500.0)
        assert model.admissible_neighbors(2) == [0, 1]
        assert model.isolated_nodes() == []
        assert not model.is_admissible(0, 1)

        model = DistanceModel.from_airports(airports, min_distance=5000.0)
        assert model.isolated_nodes() == [0, 1, 2]
        assert not model.is_connected()

    def test_tour_length(self, square_matrix):
        """閉路長は戻りの区間を含む"""
        model = DistanceModel.from_matrix(square_matrix)
        assert model.tour_length([0, 1, 2, 3]) == pytest.approx(400.0)
        assert model.tour_length([0, 2, 1, 3]) == pytest.approx(200.0 + 200.0 * 2 ** 0.5)
        assert model.tour_length([0]) == 0.0

    def test_mean_distance(self, square_matrix):
        model = DistanceModel.from_matrix(square_matrix)
        assert model.mean_distance() == pytest.approx((400.0 + 200.0 * 2 ** 0.5) / 6)

    @pytest.mark.parametrize(
        "matrix",
        [
            [[0.0, 1.0, 2.0], [1.0, 0.0, 1.0]],
            [[0.0, 1.0], [2.0, 0.0]],
            [[0.0, -1.0], [-1.0, 0.0]],
            [[0.0, float("nan")], [float("nan"), 0.0]],
        ],
    )
    def test_invalid_matrix(self, matrix):
        with pytest.raises(ValueError):
            DistanceModel.from_matrix(matrix)

    def test_negative_min_distance(self, square_matrix):
        with pytest.raises(ValueError):
            DistanceModel.from_matrix(square_matrix, min_distance=-1.0)


class TestExceptionPairs:
    """例外ペアの解析"""

    def test_parse(self):
        pairs = parse_exception_pairs(["KLAX-KSNA", "KLGA-KJFK, KEWR-KLGA"])
        assert pairs == {("KLAX", "KSNA"), ("KJFK", "KLGA"), ("KEWR", "KLGA")}

    @pytest.mark.parametrize("value", ["KLAX", "KLAX-", "-KSNA"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_exception_pairs([value])
