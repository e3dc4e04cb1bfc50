"""
空港モデル

ARINC 424の空港プライマリレコードから得られる値オブジェクトを定義します。

【座標表現】
緯度・経度は度・分・秒・1/100秒と半球記号で保持し、
10進度への変換は decimal プロパティで行います。
  decimal = sign(半球) × (度 + 分/60 + (秒 + 1/100秒/100)/3600)
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Latitude:
    """緯度（度分秒＋半球記号 N/S）"""

    hemisphere: str
    degrees: int
    minutes: int
    seconds: int
    hundredths: int = 0

    @property
    def decimal(self) -> float:
        """10進度（南緯は負）"""
        value = (
            self.degrees
            + self.minutes / 60.0
            + (self.seconds + self.hundredths / 100.0) / 3600.0
        )
        return -value if self.hemisphere == "S" else value

    def __str__(self) -> str:
        return (
            f"{self.degrees}°{self.minutes}′{self.seconds}.{self.hundredths:02d}″"
            f"{self.hemisphere}"
        )


@dataclass(frozen=True)
class Longitude:
    """経度（度分秒＋半球記号 E/W）"""

    hemisphere: str
    degrees: int
    minutes: int
    seconds: int
    hundredths: int = 0

    @property
    def decimal(self) -> float:
        """10進度（西経は負）"""
        value = (
            self.degrees
            + self.minutes / 60.0
            + (self.seconds + self.hundredths / 100.0) / 3600.0
        )
        return -value if self.hemisphere == "W" else value

    def __str__(self) -> str:
        return (
            f"{self.degrees}°{self.minutes}′{self.seconds}.{self.hundredths:02d}″"
            f"{self.hemisphere}"
        )


@dataclass(frozen=True)
class AirportRecord:
    """
    空港プライマリレコード（生成後は不変）

    識別子の一意性はAirportCatalogが保証します（デコーダは関与しない）。

    Attributes:
        identifier (str): ICAO識別子（例: "KLAX"）
        latitude (Latitude): 空港標点の緯度
        longitude (Longitude): 空港標点の経度
        name (str): 空港名
        icao_code (str): ICAO地域コード（例: "K2"）
        ata_designator (Optional[str]): ATA/IATA指定子
        elevation (Optional[int]): 標高（ft）
        longest_runway (Optional[int]): 最長滑走路長（100ft単位）
        file_record_number (Optional[int]): ファイル内レコード番号
        cycle_date (Optional[Tuple[int, int]]): AIRACサイクル（年, サイクル）
    """

    identifier: str
    latitude: Latitude
    longitude: Longitude
    name: str = ""
    icao_code: str = ""
    ata_designator: Optional[str] = None
    elevation: Optional[int] = None
    longest_runway: Optional[int] = None
    file_record_number: Optional[int] = None
    cycle_date: Optional[Tuple[int, int]] = None

    @property
    def lat(self) -> float:
        return self.latitude.decimal

    @property
    def lon(self) -> float:
        return self.longitude.decimal

    @property
    def coordinates(self) -> Tuple[float, float]:
        """(緯度, 経度) の10進度タプル"""
        return (self.lat, self.lon)

    @classmethod
    def from_decimal(
        cls, identifier: str, lat: float, lon: float, name: str = ""
    ) -> "AirportRecord":
        """
        10進度の座標から空港レコードを生成します（テスト・合成データ用）。

        Args:
            identifier: ICAO識別子
            lat: 緯度（10進度、-90 ~ 90）
            lon: 経度（10進度、-180 ~ 180）
            name: 空港名

        Returns:
            AirportRecord
        """
        return cls(
            identifier=identifier,
            latitude=Latitude("S" if lat < 0 else "N", *_split_dms(abs(lat))),
            longitude=Longitude("W" if lon < 0 else "E", *_split_dms(abs(lon))),
            name=name,
        )

    def __str__(self) -> str:
        return f"{self.identifier} ({self.name}): {self.latitude} {self.longitude}"


def _split_dms(value: float) -> Tuple[int, int, int, int]:
    """10進度を (度, 分, 秒, 1/100秒) に分解"""
    total = int(round(value * 360000))
    degrees, rest = divmod(total, 360000)
    minutes, rest = divmod(rest, 6000)
    seconds, hundredths = divmod(rest, 100)
    return degrees, minutes, seconds, hundredths
