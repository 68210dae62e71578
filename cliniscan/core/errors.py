"""
Error codes and internal exception types.

Callers branch on AnalysisResult.errors[].code only; the exceptions below
never cross the engine boundary except ConfigError, which signals a
programming mistake rather than a property of the analyzed file.
"""

UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
INVALID_JSON = "INVALID_JSON"
ANALYSIS_FAILED = "ANALYSIS_FAILED"
FILE_TOO_LARGE = "FILE_TOO_LARGE"


class PayloadParseError(ValueError):
    """Raised when a JSON payload (plain, document or embedded) cannot be decoded."""


class ConfigError(ValueError):
    """Raised for unknown or read-only configuration keys."""
