"""Core types - results, errors, header resolution and size parsing."""

from .result import (
    AnalysisError,
    AnalysisResult,
    ErrorDetails,
    FileFormat,
    FormatAnalysisOutcome,
    ImportStrategy,
    PatientPreview,
)
from .sizes import parse_file_size, validate_file_size

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "ErrorDetails",
    "FileFormat",
    "FormatAnalysisOutcome",
    "ImportStrategy",
    "PatientPreview",
    "parse_file_size",
    "validate_file_size",
]
