"""
テスト共通のフィクスチャ
"""

import matplotlib
import pytest

matplotlib.use("Agg")


def build_record(
    identifier="KLAX",
    region="K2",
    ata="LAX",
    runway="129",
    latitude="N33563299",
    longitude="W118242898",
    elevation="00128",
    name="LOS ANGELES INTL",
    record_number="31023",
    cycle="1906",
    record_type="S",
    section="P",
    subsection="A",
    continuation="0",
):
    """空港プライマリレコード（132文字）を組み立てる"""
    return (
        f"{record_type}USA{section} {identifier:<4}{region:<2}{subsection}{ata:<3}"
        f"     {continuation}     "
        f"{runway}YH{latitude}{longitude}E0120{elevation}"
        f"         1800018000C    "
        f"MNAR    {name:<30}{record_number}{cycle}"
    )


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def sample_lines():
    """KLAX / KSEA / KDEN / KJFK の4空港"""
    return [
        build_record(),
        build_record(
            identifier="KSEA",
            ata="SEA",
            runway="119",
            latitude="N47265960",
            longitude="W122184240",
            elevation="00432",
            name="SEATTLE-TACOMA INTL",
            record_number="06500",
            cycle="1807",
        ),
        build_record(
            identifier="KDEN",
            ata="DEN",
            runway="160",
            latitude="N39514200",
            longitude="W104402340",
            elevation="05434",
            name="DENVER INTL",
            record_number="63048",
            cycle="1208",
        ),
        build_record(
            identifier="KJFK",
            region="K6",
            ata="JFK",
            runway="145",
            latitude="N40382374",
            longitude="W073464329",
            elevation="00013",
            name="JOHN F KENNEDY INTL",
            record_number="25721",
            cycle="1912",
        ),
    ]


@pytest.fixture
def square_matrix():
    """一辺100kmの正方形の4頂点（平面距離）。最短閉路は外周の400km"""
    side = 100.0
    diagonal = side * 2 ** 0.5
    return [
        [0.0, side, diagonal, side],
        [side, 0.0, side, diagonal],
        [diagonal, side, 0.0, side],
        [side, diagonal, side, 0.0],
    ]
