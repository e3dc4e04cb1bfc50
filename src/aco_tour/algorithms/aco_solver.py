"""
ACO Solverモジュール

空港群を1度ずつ訪問して出発地へ戻る閉路（巡回セールスマン問題）をACOで探索します。

【アルゴリズム概要】
1. 初期化：フェロモン場を τ0 で初期化し、最良巡回路を未確定（長さ +∞）にする
2. 巡回路構築：各アリが開始ノードから、未訪問かつ通行可能なノード j を
   重み w_ij = τ_ij^α × (1/d_ij)^β に比例した確率で選択（ルーレット選択）
3. 最良解の更新：今回の巡回路のうち、既存の最良より厳密に短いものがあれば更新
4. フェロモン更新：全エッジを揮発させた後、付加戦略に従って Q / L を付加
   （rank は反復開始前の最良巡回路を候補に加える）
5. 規定の反復回数で終了（収束判定は行わない）

【状態遷移】
Initialize → IterationStart → ToursConstructed → PheromoneUpdated →
(IterationStart に戻る | Terminate)

【フォールバック】
最小区間距離の制約で、未訪問ノードへの通行可能エッジが1本もない場合、
アリは制約を無視して最も近い未訪問ノードへ移動します。これにより全てのアリが
必ず完全な巡回路を構築しますが、その巡回路は最小区間距離を満たさない可能性があります。

【並列化と再現性】
同一反復内のアリは、反復開始時の重みスナップショットを読み取るだけなので独立に構築できます。
各アリは (seed, iteration, ant_index) から導出した専用の乱数列を使うため、
workers の数やスレッドのスケジューリングに関わらず結果は同一になります。
フェロモンの揮発・付加は全アリの構築完了後に単一スレッドで行います。
"""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..config import validate_config
from ..core.ant import Ant
from ..core.catalog import MIN_TOUR_SIZE
from ..core.graph import DistanceModel
from ..exceptions import ConfigurationError
from ..modules.evaluator import TourEvaluator
from ..modules.pheromone import PheromoneEvaporator, PheromoneField, PheromoneUpdater

logger = logging.getLogger(__name__)


@dataclass
class ColonyState:
    """
    1回の最適化実行に閉じた探索状態

    Attributes:
        pheromone (PheromoneField): フェロモン場
        iteration (int): 完了した反復数
        best_tour (Optional[List[int]]): これまでの最良巡回路（ノードインデックス）
        best_length (float): 最良巡回路の長さ（未確定なら +∞）
        best_history (List[float]): 反復ごとの最良長さ
        mean_history (List[float]): 反復ごとの巡回路長の平均
        fallback_count (int): 最近傍フォールバックの累積回数
        last_tours (List[Tuple[List[int], float]]): 直前の反復で構築された (巡回路, 長さ)
    """

    pheromone: PheromoneField
    iteration: int = 0
    best_tour: Optional[List[int]] = None
    best_length: float = math.inf
    best_history: List[float] = field(default_factory=list)
    mean_history: List[float] = field(default_factory=list)
    fallback_count: int = 0
    last_tours: List[Tuple[List[int], float]] = field(default_factory=list)

    @property
    def best(self) -> Optional[Tuple[List[int], float]]:
        if self.best_tour is None:
            return None
        return self.best_tour, self.best_length


@dataclass
class RunResult:
    """
    最適化の実行結果

    Attributes:
        best_tour: 最良巡回路（ノードインデックス、閉路の戻りは暗黙）
        best_length: 最良巡回路の長さ（km）
        identifiers: 最良巡回路の空港識別子（訪問順）
        iterations: 実行した反復数
        best_history: 反復ごとの最良長さ（非増加）
        mean_history: 反復ごとの平均長さ
        fallback_count: 最近傍フォールバックの回数
        seed: 使用した乱数シード（再実行で同じ結果を再現できる）
        elapsed: 実行時間（秒）
    """

    best_tour: List[int]
    best_length: float
    identifiers: List[str]
    iterations: int
    best_history: List[float]
    mean_history: List[float]
    fallback_count: int
    seed: int
    elapsed: float = 0.0


class ColonyOptimizer:
    """
    閉路探索のACOソルバー

    Attributes:
        config (Dict): 設定辞書
        distance_model (DistanceModel): 距離モデル（読み取り専用）
        evaluator (TourEvaluator): 巡回路長と付加量の計算
        pheromone_updater (PheromoneUpdater): フェロモン付加ロジック
        pheromone_evaporator (PheromoneEvaporator): フェロモン揮発ロジック
        alpha (float): フェロモンの指数
        beta (float): 距離ヒューリスティックの指数
        num_ants (int): 1反復あたりのアリの数
        iterations (int): 反復回数
        start_node (Optional[int]): 固定の開始ノード（Noneならアリごとにランダム）
        workers (int): 巡回路構築のスレッド数
        seed (int): 乱数シード

    Example:
        >>> config = load_config("config/config.yaml")
        >>> model = DistanceModel.from_airports(catalog.airports)
        >>> result = ColonyOptimizer(config, model).run()
        >>> result.identifiers
        ['KLAX', 'KSEA', 'KDEN', 'KJFK']
    """

    def __init__(self, config: Dict, distance_model: DistanceModel):
        """
        Args:
            config: 設定辞書
            distance_model: 距離モデル

        Raises:
            ConfigurationError: ノード数が2未満、またはパラメータが範囲外の場合
        """
        validate_config(config)
        if distance_model.size < MIN_TOUR_SIZE:
            raise ConfigurationError(
                f"At least {MIN_TOUR_SIZE} airports are required, "
                f"got {distance_model.size}"
            )

        self.config = config
        self.distance_model = distance_model

        aco = config["aco"]
        experiment = config["experiment"]

        # 評価関数
        self.evaluator = TourEvaluator(distance_model, q=aco["q"])

        # フェロモン更新・揮発
        self.pheromone_updater = PheromoneUpdater(config, self.evaluator)
        self.pheromone_evaporator = PheromoneEvaporator(config)

        # ACOパラメータ
        self.alpha = aco["alpha"]
        self.beta = aco["beta"]
        self.num_ants = experiment["num_ants"]
        self.iterations = experiment["iterations"]
        self.workers = experiment.get("workers", 1)

        self.start_node = experiment.get("start_node")
        if self.start_node is not None and self.start_node >= distance_model.size:
            raise ConfigurationError(
                f"start_node {self.start_node} out of range "
                f"0..{distance_model.size - 1}"
            )

        seed = experiment.get("seed")
        if seed is None:
            seed = int(np.random.SeedSequence().generate_state(1)[0])
        self.seed = seed

    def initial_state(self) -> ColonyState:
        """Initialize 状態（フェロモン場を τ0 で初期化、最良解は未確定）"""
        aco = self.config["aco"]
        pheromone = PheromoneField.for_model(
            self.distance_model,
            initial=aco["initial_pheromone"],
            min_pheromone=aco["min_pheromone"],
            max_pheromone=aco.get("max_pheromone"),
        )
        return ColonyState(pheromone=pheromone)

    def iterate(self, state: Optional[ColonyState] = None) -> Iterator[ColonyState]:
        """
        反復ごとに探索状態を返すジェネレータ

        反復の境界でのみ中断でき、途中の state を渡せば続きから再開できます。

        Args:
            state: 再開する探索状態（Noneなら新規に初期化）

        Yields:
            各反復のフェロモン更新後の探索状態
        """
        if state is None:
            state = self.initial_state()

        isolated = self.distance_model.isolated_nodes()
        if isolated:
            logger.info(
                "%d airport(s) have no admissible leg at min distance %.1f km: %s",
                len(isolated),
                self.distance_model.min_distance,
                ", ".join(self.distance_model.labels[i] for i in isolated),
            )

        executor = (
            ThreadPoolExecutor(max_workers=self.workers) if self.workers > 1 else None
        )
        try:
            while state.iteration < self.iterations:
                self._step(state, executor)
                yield state
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

    def run(self, state: Optional[ColonyState] = None) -> RunResult:
        """
        ACOを規定の反復回数だけ実行

        Args:
            state: 再開する探索状態（Noneなら新規）

        Returns:
            実行結果
        """
        started = time.perf_counter()
        final_state = state
        for final_state in self.iterate(state):
            pass

        if final_state is None or final_state.best_tour is None:
            raise ConfigurationError("No iterations were run")

        if final_state.fallback_count:
            logger.info(
                "Nearest-unvisited fallback was used %d time(s); "
                "some tours may violate the minimum leg distance",
                final_state.fallback_count,
            )

        elapsed = time.perf_counter() - started
        labels = self.distance_model.labels
        result = RunResult(
            best_tour=list(final_state.best_tour),
            best_length=final_state.best_length,
            identifiers=[labels[i] for i in final_state.best_tour],
            iterations=final_state.iteration,
            best_history=list(final_state.best_history),
            mean_history=list(final_state.mean_history),
            fallback_count=final_state.fallback_count,
            seed=self.seed,
            elapsed=elapsed,
        )
        logger.info(
            "Best tour %.5f km over %d airports after %d iterations "
            "(%d ants, seed=%d, %.2fs)",
            result.best_length,
            self.distance_model.size,
            result.iterations,
            self.num_ants,
            self.seed,
            elapsed,
        )
        return result

    def _step(
        self, state: ColonyState, executor: Optional[ThreadPoolExecutor]
    ) -> None:
        """1反復（IterationStart → ToursConstructed → PheromoneUpdated）"""
        iteration = state.iteration
        # rank は反復開始前の最良と今回の巡回路を比べる
        previous_best = state.best
        weights = state.pheromone.selection_weights(
            self.distance_model, self.alpha, self.beta
        )

        # ===== 巡回路構築 =====
        if executor is None:
            ants = [
                self._construct_tour(k, iteration, weights)
                for k in range(self.num_ants)
            ]
        else:
            # map は入力順に結果を返す
            ants = list(
                executor.map(
                    lambda k: self._construct_tour(k, iteration, weights),
                    range(self.num_ants),
                )
            )

        tours: List[Tuple[List[int], float]] = []
        for ant in ants:
            length = ant.tour_length(
                self.distance_model.distance(ant.current_node, ant.start_node)
            )
            tours.append((ant.route, length))
            state.fallback_count += ant.fallback_steps

            # 厳密に短い場合のみ更新（同じ長さなら既存の最良を維持）
            if length < state.best_length:
                state.best_tour = list(ant.route)
                state.best_length = length
                logger.debug(
                    "Iteration %d: new best %.5f km (ant %d)",
                    iteration,
                    length,
                    ant.ant_id,
                )

        state.best_history.append(state.best_length)
        state.mean_history.append(math.fsum(length for _, length in tours) / len(tours))
        state.last_tours = tours

        # ===== フェロモン更新（揮発 → 付加）=====
        self.pheromone_evaporator.evaporate(state.pheromone)
        self.pheromone_updater.update(
            state.pheromone, tours, state.best, previous_best=previous_best
        )

        state.iteration = iteration + 1

    def _construct_tour(
        self, ant_index: int, iteration: int, weights: np.ndarray
    ) -> Ant:
        """
        1匹のアリに巡回路を構築させる

        Args:
            ant_index: アリのインデックス
            iteration: 反復番号
            weights: 反復開始時の遷移重み行列

        Returns:
            全ノードを訪問し終えたアリ
        """
        rng = np.random.default_rng([self.seed, iteration, ant_index])
        size = self.distance_model.size
        matrix = self.distance_model.matrix
        admissible = self.distance_model.admissible

        if self.start_node is None:
            start = int(rng.integers(size))
        else:
            start = self.start_node
        ant = Ant(ant_id=ant_index, start_node=start, num_nodes=size)

        while not ant.is_complete():
            current = ant.current_node
            candidates = ant.candidates()
            allowed = candidates[admissible[current, candidates]]

            if allowed.size == 0:
                # 通行可能エッジがない場合は最も近い未訪問ノードへ
                nearest = int(candidates[np.argmin(matrix[current, candidates])])
                ant.move_to(nearest, float(matrix[current, nearest]), fallback=True)
                continue

            next_node = roulette_select(allowed, weights[current, allowed], rng)
            ant.move_to(next_node, float(matrix[current, next_node]))

        return ant


def roulette_select(
    candidates: np.ndarray, weights: np.ndarray, rng: np.random.Generator
) -> int:
    """
    重みに比例した確率で候補を1つ選ぶ（ルーレット選択）

    無限大の重み（距離0のエッジ）がある場合はその中から一様に選びます。
    全ての重みが0の場合（アンダーフロー）も一様に選びます。

    Args:
        candidates: 候補ノードの配列
        weights: 候補ごとの重み（非負）
        rng: 乱数生成器

    Returns:
        選ばれたノード
    """
    infinite = np.isinf(weights)
    if infinite.any():
        pool = candidates[infinite]
        return int(pool[rng.integers(pool.size)])

    cumulative = np.cumsum(weights)
    total = cumulative[-1]
    if not np.isfinite(total) or total <= 0:
        return int(candidates[rng.integers(candidates.size)])

    index = int(np.searchsorted(cumulative, rng.random() * total, side="right"))
    return int(candidates[min(index, candidates.size - 1)])
