from .defaults import DEFAULT_CONFIG
from .engine_config import SUPPORTED_FORMATS, EngineConfig
from .loader import load_config, load_engine_config

__all__ = [
    "DEFAULT_CONFIG",
    "SUPPORTED_FORMATS",
    "EngineConfig",
    "load_config",
    "load_engine_config",
]
