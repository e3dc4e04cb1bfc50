"""
巡回路のテキストレポート
"""

from typing import List, Sequence

from ..core.airport import AirportRecord
from ..core.graph import DistanceModel


def format_report(
    distance_model: DistanceModel,
    airports: Sequence[AirportRecord],
    tour: Sequence[int],
    total_length: float,
) -> List[str]:
    """
    巡回順に1空港1行のレポートを作成します。

    区間距離は閉路長と同じ距離モデルから読み取ります。

    Example:
        KLAX (LOS ANGELES INTL): 33°56′32.99″N 118°24′28.98″W. Distance to next KSEA: 1537.1
        ...
        Total lengths: 5711.12345

    Args:
        distance_model: 巡回路を評価した距離モデル
        airports: カタログ順の空港リスト
        tour: 巡回路（ノードインデックス）
        total_length: 閉路長（km）

    Returns:
        出力行のリスト（最終行は総距離）
    """
    lines = []
    for k, node in enumerate(tour):
        next_node = tour[(k + 1) % len(tour)]
        current = airports[node]
        following = airports[next_node]
        leg = distance_model.distance(node, next_node)
        lines.append(
            f"{current}. Distance to next {following.identifier}: {leg:.1f}"
        )
    lines.append(f"Total lengths: {total_length:.5f}")
    return lines


def format_catalog(airports: Sequence[AirportRecord]) -> List[str]:
    """カタログの一覧（1空港1行）"""
    return [str(airport) for airport in airports]
