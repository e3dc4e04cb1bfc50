"""
空港カタログのテスト
"""

import pytest

from aco_tour.core.airport import AirportRecord
from aco_tour.core.catalog import AirportCatalog, read_filter_set
from aco_tour.exceptions import ConfigurationError


def _airport(identifier, lat=0.0, lon=0.0):
    return AirportRecord.from_decimal(identifier, lat, lon, name=f"{identifier} FIELD")


class TestReadFilterSet:
    """フィルタファイルの読み込み"""

    def test_one_per_line(self):
        lines = ["KLAX\n", "KSEA\r\n", "  KDEN  \n"]
        assert read_filter_set(lines) == {"KLAX", "KSEA", "KDEN"}

    def test_blank_and_comment_lines(self):
        lines = ["# west coast\n", "\n", "KLAX\n", "   \n"]
        assert read_filter_set(lines) == {"KLAX"}

    def test_columns(self):
        """空白区切りの複数列"""
        assert read_filter_set(["KLAX KSEA\tKDEN\n"]) == {"KLAX", "KSEA", "KDEN"}


class TestAirportCatalog:
    """AirportCatalogクラスのテスト"""

    @pytest.fixture
    def records(self):
        """重複を含むレコード列"""
        return [
            _airport("KLAX", 33.9, -118.4),
            _airport("KSEA", 47.4, -122.3),
            _airport("KLAX", 10.0, 10.0),
            _airport("KDEN", 39.8, -104.6),
            _airport("KJFK", 40.6, -73.7),
            _airport("KSEA", 0.0, 0.0),
        ]

    def test_deduplication_first_wins(self, records):
        """重複時は最初の出現を採用し、挿入順を保持すること"""
        catalog = AirportCatalog(records)
        assert catalog.identifiers == ["KLAX", "KSEA", "KDEN", "KJFK"]
        assert catalog[0].lat == pytest.approx(33.9, abs=1e-4)
        assert catalog.duplicates == 2

    def test_filter(self, records):
        """フィルタ集合に含まれる識別子だけが、それぞれ1度だけ残ること"""
        catalog = AirportCatalog(records, filter_set={"KSEA", "KJFK", "EGLL"})
        assert catalog.identifiers == ["KSEA", "KJFK"]
        assert catalog.missing_from_filter() == {"EGLL"}
        assert catalog.rejected == []

    def test_keep_rejected(self, records):
        """表示用にフィルタで除外したレコードを保持できること"""
        catalog = AirportCatalog(records, filter_set={"KSEA"}, keep_rejected=True)
        assert catalog.identifiers == ["KSEA"]
        assert [r.identifier for r in catalog.rejected] == ["KLAX", "KDEN", "KJFK"]
        assert catalog.rejected[0].lat == pytest.approx(33.9, abs=1e-4)
        assert catalog.duplicates == 2

    def test_rejected_duplicates_first_wins(self):
        """除外された空港も識別子ごとに最初の出現だけを保持すること"""
        records = [
            _airport("EGLL", 51.47, -0.46),
            _airport("KLAX", 33.9, -118.4),
            _airport("EGLL", 0.0, 0.0),
        ]
        catalog = AirportCatalog(records, filter_set={"KLAX"}, keep_rejected=True)
        assert [r.identifier for r in catalog.rejected] == ["EGLL"]
        assert catalog.rejected[0].lat == pytest.approx(51.47, abs=1e-4)
        assert catalog.duplicates == 1

    def test_index_of(self, records):
        catalog = AirportCatalog(records)
        assert catalog.index_of("KDEN") == 2
        assert "KJFK" in catalog
        assert "EGLL" not in catalog
        with pytest.raises(KeyError):
            catalog.index_of("EGLL")

    def test_add_returns_acceptance(self):
        catalog = AirportCatalog()
        assert catalog.add(_airport("KLAX")) is True
        assert catalog.add(_airport("KLAX")) is False
        assert len(catalog) == 1

    def test_require_tour(self):
        """空港数が2未満なら設定エラー"""
        catalog = AirportCatalog([_airport("KLAX")])
        with pytest.raises(ConfigurationError):
            catalog.require_tour()

        catalog.add(_airport("KSEA"))
        catalog.require_tour()

    def test_empty_filter_result(self, records):
        catalog = AirportCatalog(records, filter_set=set())
        assert len(catalog) == 0
        with pytest.raises(ConfigurationError):
            catalog.require_tour()
