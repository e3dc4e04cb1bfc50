"""
コマンドラインインターフェース（aco-tour）

CIFPファイルから空港プライマリレコードを読み込み、ACOで全空港を巡る閉路を探索します。

使い方:
    aco-tour FAACIFP18 --filter airports.txt --ants 50 --iterations 100 --print-aps
    cat FAACIFP18 | aco-tour - --min-dist 100 --except KLAX-KSNA --images out/
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional

from .algorithms.aco_solver import ColonyOptimizer
from .algorithms.baseline_solver import nearest_neighbor_tour
from .config import apply_overrides, load_config, validate_config
from .core.catalog import AirportCatalog, read_filter_set
from .core.graph import DistanceModel
from .exceptions import AcoTourError, ConfigurationError
from .parser.record import decode_records
from .utils.metrics import MetricsCalculator
from .utils.report import format_report
from .utils.visualization import Visualizer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aco-tour",
        description="Find a short closed tour over CIFP airports with ant colony optimization",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="CIFP input file (default: '-' reads standard input)",
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML config file")
    parser.add_argument("-f", "--filter", type=Path, help="Filter file (one ICAO code per line)")
    parser.add_argument("-a", "--ants", type=int, help="Number of ants")
    parser.add_argument("-i", "--iterations", type=int, help="Number of iterations")
    parser.add_argument("-e", "--evaporation", type=float, help="Evaporation rate (0 to 1)")
    parser.add_argument("--alpha", type=float, help="Pheromone exponent")
    parser.add_argument("--beta", type=float, help="Distance exponent")
    parser.add_argument("-m", "--min-dist", type=float, help="Minimal allowable leg distance (km)")
    parser.add_argument(
        "--except",
        dest="excepts",
        action="append",
        default=[],
        metavar="ICAO-ICAO[,...]",
        help="Allow legs below --min-dist between these airports",
    )
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--workers", type=int, help="Threads used for tour construction")
    parser.add_argument(
        "--deposit",
        choices=["all", "elitist", "rank"],
        help="Pheromone deposit strategy",
    )
    parser.add_argument("-p", "--print-aps", action="store_true", help="Print the tour report")
    parser.add_argument("-o", "--output", type=Path, help="Write the report to this file")
    parser.add_argument(
        "-u",
        "--unfiltered",
        action="store_true",
        help="Also draw airports rejected by the filter",
    )
    parser.add_argument("--images", type=Path, help="Output images directory")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def _load_catalog(args: argparse.Namespace) -> AirportCatalog:
    filter_set = None
    if args.filter is not None:
        with open(args.filter, "r", encoding="utf-8") as f:
            filter_set = read_filter_set(f)

    catalog = AirportCatalog(filter_set=filter_set, keep_rejected=args.unfiltered)
    with ExitStack() as stack:
        if args.input == "-":
            stream = sys.stdin
        else:
            stream = stack.enter_context(
                open(args.input, "r", encoding="latin-1", newline="")
            )
        catalog.extend(decode_records(stream))

    missing = catalog.missing_from_filter()
    if missing:
        logger.info(
            "%d filtered airport(s) not found in input: %s",
            len(missing),
            ", ".join(sorted(missing)),
        )
    return catalog


def _write_report(lines: List[str], output: Optional[Path]) -> None:
    if output is None:
        for line in lines:
            print(line)
        return
    with open(output, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    logger.info("Report written to %s", output)


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    apply_overrides(
        config,
        {
            "aco.alpha": args.alpha,
            "aco.beta": args.beta,
            "aco.evaporation_rate": args.evaporation,
            "aco.deposit_strategy": args.deposit,
            "experiment.num_ants": args.ants,
            "experiment.iterations": args.iterations,
            "experiment.seed": args.seed,
            "experiment.workers": args.workers,
            "graph.min_distance": args.min_dist,
            "output.log_level": args.log_level,
        },
    )
    if args.excepts:
        config["graph"]["exceptions"] = list(config["graph"]["exceptions"]) + args.excepts
    validate_config(config)

    logging.basicConfig(
        level=config["output"].get("log_level", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    catalog = _load_catalog(args)
    logger.info("Loaded %r", catalog)
    catalog.require_tour()

    try:
        model = DistanceModel.from_airports(
            catalog.airports,
            min_distance=config["graph"]["min_distance"],
            exceptions=config["graph"]["exceptions"],
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    logger.info("%r, mean leg %.1f km", model, model.mean_distance())

    optimizer = ColonyOptimizer(config, model)
    result = optimizer.run()

    print(f"Selected cycle {result.identifiers}")
    print(f"Total nodes: {len(result.best_tour)}")

    _, baseline_length = nearest_neighbor_tour(model, start=result.best_tour[0])
    summary = MetricsCalculator(baseline_length).summarize(result)
    logger.info(
        "Nearest-neighbour tour %.1f km, improvement %.2f%%, best found at iteration %d",
        baseline_length,
        summary["improvement_rate"] * 100,
        summary["iterations_to_best"],
    )

    if args.print_aps:
        lines = format_report(
            model, catalog.airports, result.best_tour, result.best_length
        )
        _write_report(lines, args.output)

    image_dir = args.images or config["output"].get("image_dir")
    if image_dir is not None:
        visualizer = Visualizer(Path(image_dir))
        visualizer.plot_tour(
            catalog.airports,
            result.best_tour,
            rejected=catalog.rejected if args.unfiltered else (),
        )
        visualizer.plot_convergence(result.best_history, result.mean_history)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    エントリポイント

    Returns:
        終了ステータス（設定・入出力エラーは2）
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except (AcoTourError, OSError) as e:
        print(f"aco-tour: error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
