import copy
from pathlib import Path

import yaml

from .defaults import DEFAULT_CONFIG
from cliniscan.config.engine_config import EngineConfig


def load_engine_config(cfg: dict) -> EngineConfig:
    """The `engine` section, validated through EngineConfig.merged()."""
    return EngineConfig().merged(cfg.get("engine") or {})


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a YAML dictionary")

    return data


def load_config(path: str | None) -> dict:
    """
    Defaults overlaid with the optional YAML file.

    Mapping sections merge key by key; any other value replaces the
    default. The result carries a typed `engine_config`.
    """
    user_config = _read_yaml(Path(path)) if path else {}

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, value in user_config.items():
        if isinstance(value, dict) and isinstance(config.get(section), dict):
            config[section].update(value)
        else:
            config[section] = value

    config["engine_config"] = load_engine_config(config)
    return config
