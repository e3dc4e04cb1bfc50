"""
アリ（Ant）クラス

ACOにおける巡回路構築エージェントを表現するモジュール。

【アリの役割】
開始ノードから出発し、全ノードを1度ずつ訪問して開始ノードへ戻る巡回路を構築する。
1反復の間だけ存在し、巡回路の評価が済めば破棄される。

【主要機能】
1. 経路記憶（タブーリスト）：訪問済みノードを記録し、再訪問を防止
2. 未訪問集合：次の移動先候補の抽出に使用
3. 累積距離：各区間の距離を記録し、閉路長を補償付き加算で計算
"""

import math
from typing import List

import numpy as np


class Ant:
    """
    巡回路を構築するアリ

    Attributes:
        ant_id (int): アリの識別子（反復内で一意）
        start_node (int): 開始ノード
        current_node (int): 現在のノード
        route (List[int]): 訪問順のノードリスト（タブーリスト）
        unvisited (np.ndarray): 未訪問ならTrueとなる真偽値配列
        leg_log (List[float]): 各区間の距離（km）
        fallback_steps (int): 通行可能エッジがなく最近傍へ移動した回数

    Example:
        >>> ant = Ant(ant_id=0, start_node=0, num_nodes=3)
        >>> ant.move_to(next_node=2, distance=120.0)
        >>> ant.route
        [0, 2]
        >>> ant.is_complete()
        False
    """

    def __init__(self, ant_id: int, start_node: int, num_nodes: int):
        """
        Args:
            ant_id: アリの識別子
            start_node: 開始ノード
            num_nodes: グラフのノード数
        """
        if not 0 <= start_node < num_nodes:
            raise ValueError(f"start_node {start_node} out of range 0..{num_nodes - 1}")
        self.ant_id = ant_id
        self.start_node = start_node
        self.current_node = start_node
        self.num_nodes = num_nodes

        self.route: List[int] = [start_node]
        self.unvisited = np.ones(num_nodes, dtype=bool)
        self.unvisited[start_node] = False

        self.leg_log: List[float] = []
        self.fallback_steps = 0

    def move_to(self, next_node: int, distance: float, fallback: bool = False) -> None:
        """
        次のノードへ移動し、経路と距離を記録します。

        Args:
            next_node: 移動先ノード（未訪問であること）
            distance: 移動に使用した区間の距離（km）
            fallback: 通行可能エッジ以外を使った移動ならTrue

        Raises:
            ValueError: 訪問済みノードへの移動
        """
        if not self.unvisited[next_node]:
            raise ValueError(f"Ant {self.ant_id} already visited node {next_node}")
        self.route.append(next_node)
        self.unvisited[next_node] = False
        self.current_node = next_node
        self.leg_log.append(distance)
        if fallback:
            self.fallback_steps += 1

    def has_visited(self, node: int) -> bool:
        return not self.unvisited[node]

    def candidates(self) -> np.ndarray:
        """未訪問ノードのインデックス配列"""
        return np.flatnonzero(self.unvisited)

    def is_complete(self) -> bool:
        """全ノードを訪問済みか"""
        return len(self.route) == self.num_nodes

    def tour_length(self, closing_distance: float) -> float:
        """
        閉路長（記録済み区間＋始点へ戻る区間）

        Args:
            closing_distance: 最終ノードから開始ノードへの距離

        Returns:
            総距離（km）
        """
        return math.fsum(self.leg_log + [closing_distance])

    def __repr__(self) -> str:
        return (
            f"Ant(id={self.ant_id}, current={self.current_node}, "
            f"route_len={len(self.route)}/{self.num_nodes}, "
            f"fallbacks={self.fallback_steps})"
        )
