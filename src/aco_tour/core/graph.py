"""
距離モデル

空港間の大圏距離（ハバーサイン公式）を密な対称行列として事前計算し、
最小区間距離の制約から通行可能エッジ（admissible edge）の集合を導出します。

【主要機能】
1. 距離行列：n×n の対称行列（km）。dist(i, i) = 0、dist(i, j) = dist(j, i)
2. 通行可能エッジ：i ≠ j かつ dist(i, j) ≥ min_distance（閾値0なら全エッジ）
3. 例外ペア：閾値未満でも通行可能とする識別子ペア（"KLAX-KSNA" 形式）
4. NetworkXグラフ：通行可能エッジのみを持つ無向グラフ（孤立ノードの検出に使用）

【設計】
最適化ループ内では辺コストをO(1)で参照するため、O(n²)のメモリで全ペアを事前計算します。
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx
import numpy as np

from .airport import AirportRecord

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    2点間の大圏距離（km）

    Args:
        lat1, lon1: 地点1の緯度・経度（10進度）
        lat2, lon2: 地点2の緯度・経度（10進度）

    Returns:
        距離（km）
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_matrix(lats: Sequence[float], lons: Sequence[float]) -> np.ndarray:
    """
    全ペアの大圏距離行列をベクトル演算で計算します。

    上三角部分を計算し転置で下三角を埋めるため、行列は厳密に対称になります。

    Args:
        lats: 緯度のリスト（10進度）
        lons: 経度のリスト（10進度）

    Returns:
        (n, n) の距離行列（km）。対角成分は0
    """
    phi = np.radians(np.asarray(lats, dtype=float))
    lam = np.radians(np.asarray(lons, dtype=float))
    dphi = phi[None, :] - phi[:, None]
    dlam = lam[None, :] - lam[:, None]
    a = (
        np.sin(dphi / 2) ** 2
        + np.cos(phi)[:, None] * np.cos(phi)[None, :] * np.sin(dlam / 2) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    dist = 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    upper = np.triu(dist, k=1)
    return upper + upper.T


def parse_exception_pairs(pairs: Iterable[str]) -> Set[Tuple[str, str]]:
    """
    "ICAO-ICAO" 形式の例外ペアを解析します（カンマ区切りも可）。

    Args:
        pairs: 例 ["KLAX-KSNA", "KJFK-KLGA,KEWR-KLGA"]

    Returns:
        順序を正規化した識別子ペアの集合

    Raises:
        ValueError: "-" を含まない要素がある場合
    """
    result: Set[Tuple[str, str]] = set()
    for item in pairs:
        for pair in str(item).split(","):
            pair = pair.strip()
            if not pair:
                continue
            first, sep, second = pair.partition("-")
            if not sep or not first.strip() or not second.strip():
                raise ValueError(
                    f"Invalid exception pair {pair!r}, expected ICAO-ICAO"
                )
            a, b = first.strip(), second.strip()
            result.add((a, b) if a <= b else (b, a))
    return result


class DistanceModel:
    """
    距離行列と通行可能エッジ集合を保持するクラス（最適化からは読み取り専用）

    Attributes:
        labels (List[str]): ノードインデックス順の識別子
        matrix (np.ndarray): (n, n) の距離行列（km）
        min_distance (float): 最小区間距離（km）
        admissible (np.ndarray): (n, n) の真偽値行列。通行可能エッジならTrue
        graph (nx.Graph): 通行可能エッジのみを持つ無向グラフ（属性 "distance"）

    Example:
        >>> model = DistanceModel.from_airports(catalog.airports, min_distance=50.0)
        >>> model.distance(0, 1)
        1537.05...
        >>> model.is_admissible(0, 1)
        True
    """

    def __init__(
        self,
        matrix: np.ndarray,
        labels: Optional[Sequence[str]] = None,
        min_distance: float = 0.0,
        exceptions: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            matrix: 対称な距離行列（km）
            labels: ノードの識別子（省略時は "0", "1", ...）
            min_distance: 最小区間距離（km、0なら制約なし）
            exceptions: 最小区間距離を適用しない "ICAO-ICAO" ペア

        Raises:
            ValueError: 行列が正方・対称・非負でない、または min_distance が負の場合
        """
        matrix = np.array(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError("Distance matrix must be square")
        if not np.array_equal(matrix, matrix.T):
            raise ValueError("Distance matrix must be symmetric")
        if np.any(matrix < 0) or not np.all(np.isfinite(matrix)):
            raise ValueError("Distances must be finite and non-negative")
        if min_distance < 0:
            raise ValueError(f"min_distance must be non-negative, got {min_distance}")

        np.fill_diagonal(matrix, 0.0)
        self.size = matrix.shape[0]
        self.matrix = matrix
        self.matrix.setflags(write=False)
        self.labels: List[str] = (
            list(labels) if labels is not None else [str(i) for i in range(self.size)]
        )
        if len(self.labels) != self.size:
            raise ValueError("Number of labels does not match matrix size")
        self.min_distance = float(min_distance)
        self.exceptions = parse_exception_pairs(exceptions or [])

        self.admissible = self._build_admissible()
        self.admissible.setflags(write=False)
        self.graph = self._build_graph()
        logger.debug(
            "Built distance model: %d nodes, %d admissible edges (min %.1f km)",
            self.size,
            self.graph.number_of_edges(),
            self.min_distance,
        )

    @classmethod
    def from_airports(
        cls,
        airports: Sequence[AirportRecord],
        min_distance: float = 0.0,
        exceptions: Optional[Iterable[str]] = None,
    ) -> "DistanceModel":
        """カタログ順の空港リストから距離モデルを構築"""
        matrix = haversine_matrix(
            [a.lat for a in airports], [a.lon for a in airports]
        )
        return cls(
            matrix,
            labels=[a.identifier for a in airports],
            min_distance=min_distance,
            exceptions=exceptions,
        )

    @classmethod
    def from_matrix(
        cls,
        matrix: Sequence[Sequence[float]],
        labels: Optional[Sequence[str]] = None,
        min_distance: float = 0.0,
    ) -> "DistanceModel":
        """明示的な距離行列から構築（平面上のテストインスタンスなど）"""
        return cls(np.asarray(matrix, dtype=float), labels, min_distance)

    def _build_admissible(self) -> np.ndarray:
        mask = self.matrix >= self.min_distance
        np.fill_diagonal(mask, False)
        if self.exceptions:
            index: Dict[str, int] = {label: i for i, label in enumerate(self.labels)}
            for a, b in self.exceptions:
                if a in index and b in index and a != b:
                    i, j = index[a], index[b]
                    mask[i, j] = mask[j, i] = True
        return mask

    def _build_graph(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(range(self.size))
        rows, cols = np.nonzero(np.triu(self.admissible, k=1))
        graph.add_edges_from(
            (int(i), int(j), {"distance": float(self.matrix[i, j])})
            for i, j in zip(rows, cols)
        )
        return graph

    def distance(self, i: int, j: int) -> float:
        return float(self.matrix[i, j])

    def is_admissible(self, i: int, j: int) -> bool:
        return bool(self.admissible[i, j])

    def admissible_neighbors(self, node: int) -> List[int]:
        """ノードから通行可能エッジで到達できるノードのリスト"""
        return sorted(self.graph.neighbors(node))

    def isolated_nodes(self) -> List[int]:
        """通行可能エッジを1本も持たないノード"""
        return sorted(nx.isolates(self.graph))

    def is_connected(self) -> bool:
        """通行可能エッジのみで全ノードが連結しているか"""
        return self.size > 0 and nx.is_connected(self.graph)

    def edge_count(self) -> int:
        return self.graph.number_of_edges()

    def mean_distance(self) -> float:
        """通行可能エッジの平均距離（エッジがなければ0）"""
        if self.graph.number_of_edges() == 0:
            return 0.0
        return math.fsum(d for _, _, d in self.graph.edges(data="distance")) / (
            self.graph.number_of_edges()
        )

    def tour_length(self, tour: Sequence[int]) -> float:
        """
        閉路の総距離（連続する区間の和＋始点へ戻る区間）

        Args:
            tour: ノードインデックスの列

        Returns:
            総距離（km）。補償付き加算（math.fsum）で計算
        """
        if len(tour) < 2:
            return 0.0
        legs = (
            self.matrix[tour[k], tour[(k + 1) % len(tour)]] for k in range(len(tour))
        )
        return math.fsum(float(d) for d in legs)

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (
            f"DistanceModel(nodes={self.size}, "
            f"admissible_edges={self.graph.number_of_edges()}, "
            f"min_distance={self.min_distance})"
        )
