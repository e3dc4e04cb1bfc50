"""
比較用の基準解

最近傍法（Nearest Neighbor）で決定的な巡回路を構築します。
ACOの結果がこの基準解からどれだけ改善したかを評価するために使用します。
"""

from typing import List, Tuple

import numpy as np

from ..core.graph import DistanceModel


def nearest_neighbor_tour(
    distance_model: DistanceModel, start: int = 0
) -> Tuple[List[int], float]:
    """
    最近傍法による巡回路

    通行可能エッジを優先し、候補がなければ制約を無視して最も近い未訪問ノードへ移動します。
    距離が同じ場合はインデックスの小さいノードを選びます。

    Args:
        distance_model: 距離モデル
        start: 開始ノード

    Returns:
        (巡回路, 閉路長)
    """
    size = distance_model.size
    if not 0 <= start < size:
        raise ValueError(f"start {start} out of range 0..{size - 1}")

    matrix = distance_model.matrix
    admissible = distance_model.admissible
    unvisited = np.ones(size, dtype=bool)
    unvisited[start] = False
    tour = [start]

    current = start
    while len(tour) < size:
        candidates = np.flatnonzero(unvisited)
        allowed = candidates[admissible[current, candidates]]
        pool = allowed if allowed.size else candidates
        current = int(pool[np.argmin(matrix[current, pool])])
        unvisited[current] = False
        tour.append(current)

    return tour, distance_model.tour_length(tour)
