"""
評価指標モジュール

最良長さの推移から収束の速さを、基準解（最近傍法）との比較から改善率を計算します。
"""

from typing import Dict, List, Optional

from ..algorithms.aco_solver import RunResult


class MetricsCalculator:
    """
    実行結果の評価指標を計算するクラス

    Attributes:
        baseline_length (Optional[float]): 基準解の閉路長（Noneなら改善率を計算しない）
    """

    def __init__(self, baseline_length: Optional[float] = None):
        """
        Args:
            baseline_length: 基準解（最近傍法）の閉路長
        """
        self.baseline_length = baseline_length

    def calculate_improvement_rate(self, best_length: float) -> float:
        """
        基準解からの改善率

        定義: (基準長 - 最良長) / 基準長

        Args:
            best_length: ACOの最良巡回路長

        Returns:
            改善率（基準解より悪ければ負の値）。基準解がなければ0.0
        """
        if not self.baseline_length:
            return 0.0
        return (self.baseline_length - best_length) / self.baseline_length

    @staticmethod
    def calculate_iterations_to_best(best_history: List[float]) -> int:
        """
        最終的な最良長さに初めて到達した反復（1始まり）

        Args:
            best_history: 反復ごとの最良長さ

        Returns:
            反復番号。履歴が空なら0
        """
        if not best_history:
            return 0
        final = best_history[-1]
        for i, length in enumerate(best_history):
            if length == final:
                return i + 1
        return len(best_history)

    @staticmethod
    def calculate_improvement_count(best_history: List[float]) -> int:
        """最良長さが更新された回数（最初の確定を含む）"""
        count = 0
        previous = float("inf")
        for length in best_history:
            if length < previous:
                count += 1
                previous = length
        return count

    def summarize(self, result: RunResult) -> Dict[str, float]:
        """
        実行結果の指標をまとめる

        Args:
            result: 実行結果

        Returns:
            指標名をキーとする辞書
        """
        summary = {
            "best_length": result.best_length,
            "iterations": result.iterations,
            "iterations_to_best": self.calculate_iterations_to_best(result.best_history),
            "improvements": self.calculate_improvement_count(result.best_history),
            "fallback_count": result.fallback_count,
            "final_mean_length": result.mean_history[-1] if result.mean_history else 0.0,
        }
        if self.baseline_length is not None:
            summary["baseline_length"] = self.baseline_length
            summary["improvement_rate"] = self.calculate_improvement_rate(
                result.best_length
            )
        return summary
