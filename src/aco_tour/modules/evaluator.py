"""
評価関数モジュール

巡回路の長さと、フェロモン付加量 Δτ = Q / L を計算します。
"""

from typing import Sequence

from ..core.graph import DistanceModel


class TourEvaluator:
    """
    巡回路の評価を行うクラス

    Attributes:
        distance_model (DistanceModel): 距離モデル
        q (float): フェロモン付加定数 Q
    """

    def __init__(self, distance_model: DistanceModel, q: float = 1.0):
        """
        Args:
            distance_model: 距離モデル
            q: フェロモン付加定数（正の値）
        """
        if q <= 0:
            raise ValueError(f"q must be positive, got {q}")
        self.distance_model = distance_model
        self.q = q

    def tour_length(self, tour: Sequence[int]) -> float:
        """閉路長（km）"""
        return self.distance_model.tour_length(tour)

    def deposit_amount(self, length: float) -> float:
        """
        巡回路1本あたりのフェロモン付加量

        Args:
            length: 閉路長

        Returns:
            Q / length（短い巡回路ほど大きい）。長さ0の場合は0
        """
        if length <= 0:
            return 0.0
        return self.q / length

    def is_valid_tour(self, tour: Sequence[int]) -> bool:
        """全ノードを1度ずつ訪問する順列か"""
        return sorted(tour) == list(range(self.distance_model.size))
