"""
CliniScan

Pre-import analysis of clinical data files: format detection,
record counting, import strategy and duration estimates.
"""

from .__version__ import __version__

from .core.result import (
    AnalysisError,
    AnalysisResult,
    ErrorDetails,
    FileFormat,
    ImportStrategy,
    PatientPreview,
)
from .core.sizes import parse_file_size
from .config.engine_config import EngineConfig
from .detection import detect_csv_delimiter, detect_format
from .policy import determine_strategy, estimate_import_time
from .engine import AnalysisEngine, analyze_file_content, get_supported_formats

__all__ = [
    "__version__",
    "AnalysisEngine",
    "AnalysisError",
    "AnalysisResult",
    "EngineConfig",
    "ErrorDetails",
    "FileFormat",
    "ImportStrategy",
    "PatientPreview",
    "analyze_file_content",
    "detect_csv_delimiter",
    "detect_format",
    "determine_strategy",
    "estimate_import_time",
    "get_supported_formats",
    "parse_file_size",
]
