"""
フェロモン場と更新・揮発ロジック

【フェロモン場】
通行可能エッジごとに1つの正の重みを保持する（無向なので対称）。
最適化器だけが反復の境界で変更する。

【揮発】
全エッジの重みを (1 - ρ) 倍する。下限値（min_pheromone）を下回る場合は下限値に切り上げ、
数値的なアンダーフローでエッジが到達不能になることを防ぐ。

【付加戦略】
- all: 全アリが自分の巡回路の各エッジに Q / L を付加
- elitist: これまでの最良巡回路のみが付加
- rank: 今回の巡回路群＋反復開始前の最良巡回路を長さ順に並べ、上位半分（切り上げ）が付加
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..core.graph import DistanceModel
from .evaluator import TourEvaluator

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_PHEROMONE = 1.0
DEFAULT_MIN_PHEROMONE = 1e-5

DEPOSIT_STRATEGIES = ("all", "elitist", "rank")

Edge = Tuple[int, int]


class PheromoneField:
    """
    エッジごとのフェロモン量を保持するクラス

    Attributes:
        admissible (np.ndarray): 通行可能エッジのマスク
        tau (np.ndarray): (n, n) のフェロモン行列（通行不可エッジは0）
        min_pheromone (float): 揮発後の下限値
        max_pheromone (Optional[float]): 付加後の上限値（Noneなら上限なし）
    """

    def __init__(
        self,
        admissible: np.ndarray,
        initial: float = DEFAULT_INITIAL_PHEROMONE,
        min_pheromone: float = DEFAULT_MIN_PHEROMONE,
        max_pheromone: Optional[float] = None,
    ):
        """
        Args:
            admissible: 通行可能エッジの真偽値行列（対称）
            initial: 初期フェロモン量 τ0（正の値）
            min_pheromone: 下限値（正の値）
            max_pheromone: 上限値（Noneなら上限なし）

        Raises:
            ValueError: initial/min_pheromone が正でない、または上限が下限未満
        """
        if initial <= 0:
            raise ValueError(f"initial pheromone must be positive, got {initial}")
        if min_pheromone <= 0:
            raise ValueError(f"min_pheromone must be positive, got {min_pheromone}")
        if max_pheromone is not None and max_pheromone < max(min_pheromone, initial):
            raise ValueError("max_pheromone must not be below initial/min pheromone")

        self.admissible = np.asarray(admissible, dtype=bool)
        self.min_pheromone = min_pheromone
        self.max_pheromone = max_pheromone
        self.tau = np.where(self.admissible, float(initial), 0.0)

    @classmethod
    def for_model(cls, distance_model: DistanceModel, **kwargs) -> "PheromoneField":
        return cls(distance_model.admissible, **kwargs)

    def get(self, i: int, j: int) -> float:
        """
        エッジ (i, j) のフェロモン量

        Raises:
            KeyError: 通行可能エッジでない場合
        """
        if not self.admissible[i, j]:
            raise KeyError((i, j))
        return float(self.tau[i, j])

    def evaporate(self, rho: float) -> None:
        """
        全エッジのフェロモンを揮発させます。

        Args:
            rho: 揮発率（[0, 1] にクランプ）
        """
        rho = min(max(rho, 0.0), 1.0)
        self.tau *= 1.0 - rho
        np.maximum(self.tau, self.min_pheromone, out=self.tau, where=self.admissible)

    def deposit(self, edges: Iterable[Edge], amount: float) -> None:
        """
        エッジ群にフェロモンを付加します（双方向）。

        通行可能エッジでないもの（最近傍フォールバックで使われたエッジなど）は無視します。

        Args:
            edges: (i, j) のイテラブル
            amount: 付加量（非負）

        Raises:
            ValueError: 付加量が負の場合
        """
        if amount < 0:
            raise ValueError(f"deposit amount must be non-negative, got {amount}")
        if amount == 0:
            return
        for i, j in edges:
            if i == j or not self.admissible[i, j]:
                continue
            value = self.tau[i, j] + amount
            if self.max_pheromone is not None:
                value = min(value, self.max_pheromone)
            self.tau[i, j] = self.tau[j, i] = value

    def selection_weights(
        self, distance_model: DistanceModel, alpha: float, beta: float
    ) -> np.ndarray:
        """
        遷移重み τ^α · (1/d)^β の行列（反復開始時のスナップショット）

        距離0のエッジ（同一座標の空港）は重みが無限大になり、最優先で選ばれます。
        通行不可エッジの重みは0です。

        Args:
            distance_model: 距離モデル
            alpha: フェロモンの指数
            beta: 距離ヒューリスティックの指数

        Returns:
            (n, n) の重み行列
        """
        dist = distance_model.matrix
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            heuristic = np.where(dist > 0, 1.0 / np.where(dist > 0, dist, 1.0), np.inf)
            weights = np.power(self.tau, alpha) * np.power(heuristic, beta)
        weights = np.where(self.admissible, weights, 0.0)
        return np.nan_to_num(weights, nan=0.0, posinf=np.inf)

    def min_weight(self) -> float:
        """通行可能エッジ中の最小フェロモン量"""
        values = self.tau[self.admissible]
        return float(values.min()) if values.size else float("nan")

    def max_weight(self) -> float:
        values = self.tau[self.admissible]
        return float(values.max()) if values.size else float("nan")

    def as_dict(self) -> Dict[Edge, float]:
        """{(i, j): τ_ij} 形式（i < j）"""
        rows, cols = np.nonzero(np.triu(self.admissible, k=1))
        return {(int(i), int(j)): float(self.tau[i, j]) for i, j in zip(rows, cols)}

    def copy(self) -> "PheromoneField":
        clone = PheromoneField.__new__(PheromoneField)
        clone.admissible = self.admissible
        clone.min_pheromone = self.min_pheromone
        clone.max_pheromone = self.max_pheromone
        clone.tau = self.tau.copy()
        return clone

    def __repr__(self) -> str:
        return (
            f"PheromoneField(edges={int(self.admissible.sum()) // 2}, "
            f"min={self.min_weight():.3g}, max={self.max_weight():.3g})"
        )


class PheromoneEvaporator:
    """
    フェロモン揮発を管理するクラス

    Attributes:
        evaporation_rate (float): 揮発率 ρ
    """

    def __init__(self, config: Dict):
        """
        Args:
            config: 設定辞書（config["aco"]["evaporation_rate"] を使用）
        """
        self.evaporation_rate = config["aco"]["evaporation_rate"]

    def evaporate(self, field: PheromoneField) -> None:
        field.evaporate(self.evaporation_rate)


class PheromoneUpdater:
    """
    フェロモン付加を管理するクラス

    Attributes:
        evaluator (TourEvaluator): 付加量 Q / L の計算
        strategy (str): 付加戦略（"all" / "elitist" / "rank"）
    """

    def __init__(self, config: Dict, evaluator: TourEvaluator):
        """
        Args:
            config: 設定辞書（config["aco"]["deposit_strategy"] を使用）
            evaluator: 評価関数オブジェクト

        Raises:
            ValueError: 未知の付加戦略
        """
        self.evaluator = evaluator
        self.strategy = config["aco"].get("deposit_strategy", "all")
        if self.strategy not in DEPOSIT_STRATEGIES:
            raise ValueError(f"Unknown deposit strategy: {self.strategy}")

    def select_depositors(
        self,
        tours: Sequence[Tuple[List[int], float]],
        best: Optional[Tuple[List[int], float]],
        previous_best: Optional[Tuple[List[int], float]] = None,
    ) -> List[Tuple[List[int], float]]:
        """
        付加を行う巡回路を戦略に従って選択します。

        rank では今回の巡回路と「反復開始前の」最良巡回路を並べます。
        今回見つかった最良巡回路は既に tours に含まれるため、二重に数えません。

        Args:
            tours: 今回の反復で構築された (巡回路, 長さ) のリスト（アリ順）
            best: 今回の反復を反映した最良 (巡回路, 長さ)。未確定ならNone
            previous_best: 反復開始前の最良 (巡回路, 長さ)。未確定ならNone

        Returns:
            付加を行う (巡回路, 長さ) のリスト
        """
        if self.strategy == "all":
            return list(tours)
        if self.strategy == "elitist":
            return [best] if best is not None else []
        # rank: 安定ソートで同じ長さならアリ順を維持
        pool = list(tours)
        if previous_best is not None:
            pool.append(previous_best)
        pool.sort(key=lambda item: item[1])
        return pool[: (len(pool) + 1) // 2]

    def update(
        self,
        field: PheromoneField,
        tours: Sequence[Tuple[List[int], float]],
        best: Optional[Tuple[List[int], float]],
        previous_best: Optional[Tuple[List[int], float]] = None,
    ) -> None:
        """
        選択された巡回路の各エッジ（閉路の戻りエッジを含む）に Q / L を付加します。

        Args:
            field: フェロモン場
            tours: 今回の (巡回路, 長さ) のリスト
            best: 今回の反復を反映した最良 (巡回路, 長さ)
            previous_best: 反復開始前の最良 (巡回路, 長さ)
        """
        depositors = self.select_depositors(tours, best, previous_best)
        logger.debug(
            "Depositing pheromone from %d tour(s) (%s)", len(depositors), self.strategy
        )
        for tour, length in depositors:
            amount = self.evaluator.deposit_amount(length)
            field.deposit(closed_edges(tour), amount)


def closed_edges(tour: Sequence[int]) -> List[Edge]:
    """閉路のエッジリスト（最後のノードから先頭ノードへのエッジを含む）"""
    if len(tour) < 2:
        return []
    return [(tour[k], tour[(k + 1) % len(tour)]) for k in range(len(tour))]
