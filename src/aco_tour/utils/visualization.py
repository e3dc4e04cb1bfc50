"""
可視化モジュール

巡回路の地図（経度・緯度の正距円筒図）と、最良長さ・平均長さの推移を可視化します。
"""

from pathlib import Path
from typing import List, Sequence

import matplotlib.pyplot as plt

from ..core.airport import AirportRecord

MARGIN_RATIO = 0.05


class Visualizer:
    """可視化を行うクラス"""

    def __init__(self, output_dir: Path):
        """
        Args:
            output_dir: 出力ディレクトリ
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def plot_tour(
        self,
        airports: Sequence[AirportRecord],
        tour: Sequence[int],
        rejected: Sequence[AirportRecord] = (),
        filename: str = "aco.png",
    ) -> Path:
        """
        巡回路を地図上に描画（閉路、ICAOラベル付き）

        Args:
            airports: カタログ順の空港リスト
            tour: 巡回路（ノードインデックス）
            rejected: フィルタで除外された空港（灰色で表示のみ）
            filename: 保存するファイル名

        Returns:
            保存先のパス
        """
        fig, ax = plt.subplots(figsize=(12, 8))

        # 除外された空港（灰色）
        if rejected:
            ax.scatter(
                [a.lon for a in rejected],
                [a.lat for a in rejected],
                c="lightgray",
                marker=".",
                s=10,
                label="Filtered out",
            )

        # 巡回路（閉路）
        closed = list(tour) + list(tour[:1])
        ax.plot(
            [airports[i].lon for i in closed],
            [airports[i].lat for i in closed],
            c="tab:blue",
            linewidth=1.0,
            alpha=0.8,
            label="Tour",
        )

        # 空港（赤色）
        ax.scatter(
            [a.lon for a in airports],
            [a.lat for a in airports],
            c="red",
            marker="o",
            s=20,
            label="Airports",
            zorder=3,
            edgecolors="black",
        )
        for airport in airports:
            ax.annotate(
                airport.identifier,
                (airport.lon, airport.lat),
                textcoords="offset points",
                xytext=(3, 3),
                fontsize=7,
            )

        # 5%の余白
        everything = list(airports) + list(rejected)
        lons = [a.lon for a in everything]
        lats = [a.lat for a in everything]
        lon_pad = (max(lons) - min(lons)) * MARGIN_RATIO or 1.0
        lat_pad = (max(lats) - min(lats)) * MARGIN_RATIO or 1.0
        ax.set_xlim(min(lons) - lon_pad, max(lons) + lon_pad)
        ax.set_ylim(min(lats) - lat_pad, max(lats) + lat_pad)

        ax.set_xlabel("Longitude (deg)", fontsize=12)
        ax.set_ylabel("Latitude (deg)", fontsize=12)
        ax.legend()
        ax.grid(True, alpha=0.3)

        # 保存
        output_path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(output_path, dpi=300)
        plt.close(fig)
        print(f"Saved: {output_path}")
        return output_path

    def plot_convergence(
        self,
        best_history: List[float],
        mean_history: List[float],
        filename: str = "convergence.png",
    ) -> Path:
        """
        反復ごとの最良長さと平均長さの推移

        Args:
            best_history: 反復ごとの最良長さ
            mean_history: 反復ごとの平均長さ
            filename: 保存するファイル名

        Returns:
            保存先のパス
        """
        fig, ax = plt.subplots(figsize=(10, 6))

        iterations = range(1, len(best_history) + 1)
        ax.plot(iterations, best_history, linewidth=2, label="Best")
        if mean_history:
            ax.plot(
                range(1, len(mean_history) + 1),
                mean_history,
                linewidth=1,
                alpha=0.6,
                label="Mean",
            )

        ax.set_xlabel("Iteration", fontsize=12)
        ax.set_ylabel("Tour length (km)", fontsize=12)
        ax.legend()
        ax.grid(True, alpha=0.3)

        output_path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(output_path, dpi=300)
        plt.close(fig)
        print(f"Saved: {output_path}")
        return output_path
