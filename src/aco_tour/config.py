"""
設定モジュール

config.yaml を読み込み、組み込みの既定値とマージして検証します。

【設定の構造】
- aco: ACOパラメータ（alpha, beta, evaporation_rate, q, フェロモン初期値・下限・上限, 付加戦略）
- experiment: 実行パラメータ（num_ants, iterations, seed, start_node, workers）
- graph: 距離モデル（min_distance, exceptions）
- output: 出力（log_level, image_dir）
"""

import copy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigurationError
from .modules.pheromone import DEPOSIT_STRATEGIES

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "aco": {
        "alpha": 0.9,
        "beta": 1.5,
        "evaporation_rate": 0.1,
        "q": 1.0,
        "initial_pheromone": 1.0,
        "min_pheromone": 1e-5,
        "max_pheromone": None,
        "deposit_strategy": "all",
    },
    "experiment": {
        "num_ants": 50,
        "iterations": 100,
        "seed": None,
        "start_node": None,
        "workers": 1,
    },
    "graph": {
        "min_distance": 0.0,
        "exceptions": [],
    },
    "output": {
        "log_level": "INFO",
        "image_dir": None,
    },
}


def _deep_merge(base: Dict, override: Mapping) -> Dict:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def default_config() -> Dict[str, Dict[str, Any]]:
    """既定値の設定辞書（コピー）"""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス（Noneなら既定値のみ）

    Returns:
        既定値にファイルの内容をマージし、検証済みの設定辞書

    Raises:
        ConfigurationError: ファイルの形式が不正、または値が範囲外の場合
    """
    config = default_config()
    if config_path is not None:
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        if loaded is not None:
            if not isinstance(loaded, Mapping):
                raise ConfigurationError(
                    f"Top level of {config_path} must be a mapping"
                )
            _deep_merge(config, loaded)
    validate_config(config)
    return config


def apply_overrides(config: Dict, overrides: Mapping[str, Any]) -> Dict:
    """
    "section.key" 形式の上書き値を適用します（値がNoneのものは無視）。

    Args:
        config: 設定辞書（直接変更される）
        overrides: 例 {"aco.alpha": 1.0, "experiment.num_ants": 30}

    Returns:
        変更後の設定辞書
    """
    for dotted, value in overrides.items():
        if value is None:
            continue
        section, _, key = dotted.partition(".")
        config.setdefault(section, {})[key] = value
    return config


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Mapping) -> None:
    """
    設定値の範囲を検証します。

    Raises:
        ConfigurationError: 値が範囲外の場合
    """
    for section in ("aco", "experiment", "graph"):
        _require(isinstance(config.get(section), Mapping), f"missing section: {section}")

    aco = config["aco"]
    _require(_is_number(aco["alpha"]) and aco["alpha"] >= 0,
             f"aco.alpha must be >= 0, got {aco['alpha']!r}")
    _require(_is_number(aco["beta"]) and aco["beta"] >= 0,
             f"aco.beta must be >= 0, got {aco['beta']!r}")
    _require(_is_number(aco["evaporation_rate"]) and 0 <= aco["evaporation_rate"] <= 1,
             f"aco.evaporation_rate must be in [0, 1], got {aco['evaporation_rate']!r}")
    _require(_is_number(aco["q"]) and aco["q"] > 0,
             f"aco.q must be > 0, got {aco['q']!r}")
    _require(_is_number(aco["initial_pheromone"]) and aco["initial_pheromone"] > 0,
             f"aco.initial_pheromone must be > 0, got {aco['initial_pheromone']!r}")
    _require(_is_number(aco["min_pheromone"]) and aco["min_pheromone"] > 0,
             f"aco.min_pheromone must be > 0, got {aco['min_pheromone']!r}")
    max_pheromone = aco.get("max_pheromone")
    if max_pheromone is not None:
        _require(
            _is_number(max_pheromone)
            and max_pheromone >= max(aco["min_pheromone"], aco["initial_pheromone"]),
            "aco.max_pheromone must be >= initial_pheromone and min_pheromone",
        )
    _require(aco.get("deposit_strategy", "all") in DEPOSIT_STRATEGIES,
             f"aco.deposit_strategy must be one of {DEPOSIT_STRATEGIES}, "
             f"got {aco.get('deposit_strategy')!r}")

    experiment = config["experiment"]
    _require(_is_int(experiment["num_ants"]) and experiment["num_ants"] > 0,
             f"experiment.num_ants must be a positive integer, got {experiment['num_ants']!r}")
    _require(_is_int(experiment["iterations"]) and experiment["iterations"] > 0,
             f"experiment.iterations must be a positive integer, "
             f"got {experiment['iterations']!r}")
    seed = experiment.get("seed")
    _require(seed is None or (_is_int(seed) and seed >= 0),
             f"experiment.seed must be a non-negative integer or null, got {seed!r}")
    start_node = experiment.get("start_node")
    _require(start_node is None or (_is_int(start_node) and start_node >= 0),
             f"experiment.start_node must be a non-negative integer or null, "
             f"got {start_node!r}")
    workers = experiment.get("workers", 1)
    _require(_is_int(workers) and workers > 0,
             f"experiment.workers must be a positive integer, got {workers!r}")

    graph = config["graph"]
    _require(_is_number(graph["min_distance"]) and graph["min_distance"] >= 0,
             f"graph.min_distance must be >= 0, got {graph['min_distance']!r}")
    _require(isinstance(graph.get("exceptions", []), (list, tuple)),
             "graph.exceptions must be a list of ICAO-ICAO pairs")
