"""
コアモジュールのテスト
"""

import pytest

from aco_tour.core.airport import AirportRecord, Latitude, Longitude
from aco_tour.core.ant import Ant
from aco_tour.modules.pheromone import closed_edges


class TestAnt:
    """Antクラスのテスト"""

    def test_initialization(self):
        """初期化のテスト"""
        ant = Ant(ant_id=0, start_node=2, num_nodes=4)
        assert ant.ant_id == 0
        assert ant.current_node == 2
        assert ant.route == [2]
        assert ant.has_visited(2)
        assert list(ant.candidates()) == [0, 1, 3]
        assert ant.fallback_steps == 0

    def test_move_to(self):
        """移動のテスト"""
        ant = Ant(ant_id=0, start_node=0, num_nodes=3)
        ant.move_to(next_node=2, distance=120.0)

        assert ant.current_node == 2
        assert ant.route == [0, 2]
        assert ant.leg_log == [120.0]
        assert not ant.is_complete()

        ant.move_to(next_node=1, distance=80.0, fallback=True)
        assert ant.is_complete()
        assert ant.fallback_steps == 1
        assert list(ant.candidates()) == []

    def test_revisit_is_rejected(self):
        """訪問済みノードへの移動はエラー"""
        ant = Ant(ant_id=0, start_node=0, num_nodes=3)
        ant.move_to(1, 10.0)
        with pytest.raises(ValueError):
            ant.move_to(0, 10.0)

    def test_start_out_of_range(self):
        with pytest.raises(ValueError):
            Ant(ant_id=0, start_node=5, num_nodes=3)

    def test_tour_length(self):
        """閉路長は戻り区間を含む"""
        ant = Ant(ant_id=0, start_node=0, num_nodes=3)
        ant.move_to(1, 0.1)
        ant.move_to(2, 0.2)
        assert ant.tour_length(closing_distance=0.3) == pytest.approx(0.6)

    def test_route_closed_edges(self):
        """完成した経路から閉路のエッジ（始点へ戻るエッジを含む）が得られる"""
        ant = Ant(ant_id=0, start_node=0, num_nodes=3)
        ant.move_to(2, 1.0)
        ant.move_to(1, 1.0)
        assert closed_edges(ant.route) == [(0, 2), (2, 1), (1, 0)]


class TestAirportRecord:
    """座標と空港レコードの値オブジェクト"""

    def test_latitude_decimal(self):
        latitude = Latitude("N", 33, 56, 32, 99)
        assert latitude.decimal == pytest.approx(33.942497222, abs=1e-9)
        assert Latitude("S", 33, 56, 32, 99).decimal == -latitude.decimal

    def test_longitude_decimal(self):
        assert Longitude("W", 118, 24, 28, 98).decimal == pytest.approx(-118.40805)

    def test_str(self):
        record = AirportRecord(
            identifier="KLAX",
            latitude=Latitude("N", 33, 56, 32, 99),
            longitude=Longitude("W", 118, 24, 28, 98),
            name="LOS ANGELES INTL",
        )
        assert str(record) == "KLAX (LOS ANGELES INTL): 33°56′32.99″N 118°24′28.98″W"
        assert record.coordinates == (record.lat, record.lon)

    def test_from_decimal(self):
        record = AirportRecord.from_decimal("YSSY", -33.946111, 151.177222)
        assert record.latitude.hemisphere == "S"
        assert record.longitude.hemisphere == "E"
        assert record.lat == pytest.approx(-33.946111, abs=1e-5)
        assert record.lon == pytest.approx(151.177222, abs=1e-5)

    def test_immutable(self):
        record = AirportRecord.from_decimal("KLAX", 33.9, -118.4)
        with pytest.raises(AttributeError):
            record.identifier = "KSEA"
