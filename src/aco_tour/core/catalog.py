"""
空港カタログ

デコードされた空港レコードを識別子をキーとして蓄積し、重複排除とフィルタ適用を行います。

【カタログの不変条件】
1. 同じ識別子を持つエントリは存在しない（重複時は最初の出現を採用）
2. フィルタ集合が指定された場合、全エントリの識別子はその集合に含まれる
3. 挿入順を保持し、インデックス 0..n-1 を後段（距離モデル・最適化）で共通に使用する
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..exceptions import ConfigurationError
from .airport import AirportRecord

logger = logging.getLogger(__name__)

MIN_TOUR_SIZE = 2


def read_filter_set(lines: Iterable[str]) -> Set[str]:
    """
    フィルタファイルの内容から識別子集合を作成します。

    1行に1識別子（空白区切りで複数列も可）。空行と '#' で始まる行は無視します。

    Args:
        lines: 行のイテラブル

    Returns:
        識別子の集合
    """
    identifiers: Set[str] = set()
    for line in lines:
        line = line.strip().strip("\r")
        if not line or line.startswith("#"):
            continue
        identifiers.update(line.split())
    return identifiers


class AirportCatalog:
    """
    重複排除・フィルタ済みの空港カタログ

    Attributes:
        filter_set (Optional[Set[str]]): 採用する識別子の集合（Noneなら全て採用）
        keep_rejected (bool): フィルタで除外したレコードをrejectedに保持するか
            （表示専用。最適化グラフには含まれない）
        rejected (List[AirportRecord]): フィルタで除外されたレコード（識別子ごとに最初の出現のみ）
        duplicates (int): 読み捨てた重複レコード数

    Example:
        >>> catalog = AirportCatalog(filter_set={"KLAX", "KSEA"})
        >>> catalog.extend(records)
        >>> catalog.index_of("KSEA")
        1
    """

    def __init__(
        self,
        records: Optional[Iterable[AirportRecord]] = None,
        filter_set: Optional[Set[str]] = None,
        keep_rejected: bool = False,
    ):
        self.filter_set = set(filter_set) if filter_set is not None else None
        self.keep_rejected = keep_rejected
        self.rejected: List[AirportRecord] = []
        self.duplicates = 0
        self._airports: List[AirportRecord] = []
        self._index: Dict[str, int] = {}
        self._rejected_index: Set[str] = set()
        if records is not None:
            self.extend(records)

    def add(self, record: AirportRecord) -> bool:
        """
        レコードを1件追加します。

        Args:
            record: 空港レコード

        Returns:
            カタログに採用された場合True
        """
        if self.filter_set is not None and record.identifier not in self.filter_set:
            if not self.keep_rejected:
                return False
            if record.identifier in self._rejected_index:
                self.duplicates += 1
                logger.debug("Ignoring duplicate rejected airport %s", record.identifier)
                return False
            self._rejected_index.add(record.identifier)
            self.rejected.append(record)
            return False
        if record.identifier in self._index:
            # 最初の出現を採用
            self.duplicates += 1
            logger.debug("Ignoring duplicate airport %s", record.identifier)
            return False
        self._index[record.identifier] = len(self._airports)
        self._airports.append(record)
        return True

    def extend(self, records: Iterable[AirportRecord]) -> int:
        """複数のレコードを追加し、採用件数を返します。"""
        return sum(1 for record in records if self.add(record))

    @property
    def airports(self) -> Tuple[AirportRecord, ...]:
        return tuple(self._airports)

    @property
    def identifiers(self) -> List[str]:
        return [airport.identifier for airport in self._airports]

    def index_of(self, identifier: str) -> int:
        """
        識別子からノードインデックスを取得

        Raises:
            KeyError: カタログに存在しない識別子
        """
        return self._index[identifier]

    def missing_from_filter(self) -> Set[str]:
        """フィルタ集合に含まれるが、入力に現れなかった識別子"""
        if self.filter_set is None:
            return set()
        return self.filter_set - set(self._index)

    def require_tour(self) -> None:
        """
        巡回路を構成できるサイズかを確認します。

        Raises:
            ConfigurationError: 空港数が2未満の場合
        """
        if len(self._airports) < MIN_TOUR_SIZE:
            raise ConfigurationError(
                f"catalog has {len(self._airports)} airport(s); "
                f"at least {MIN_TOUR_SIZE} are required to build a tour"
            )

    def __len__(self) -> int:
        return len(self._airports)

    def __iter__(self):
        return iter(self._airports)

    def __getitem__(self, index: int) -> AirportRecord:
        return self._airports[index]

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._index

    def __repr__(self) -> str:
        return (
            f"AirportCatalog(airports={len(self._airports)}, "
            f"rejected={len(self.rejected)}, duplicates={self.duplicates})"
        )
