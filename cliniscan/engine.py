"""
Analysis engine: the public face of CliniScan.

Pipeline:
1. Detect the format (extension, then content sniffing)
2. Run the matching format analyzer
3. Attach strategy and time estimate from the import policy
4. Return one immutable AnalysisResult

analyze_file_content() never raises; every failure becomes a result.
"""

from typing import Any, List, Mapping, Optional

from cliniscan.analyzers import get_analyzer
from cliniscan.config.engine_config import EngineConfig
from cliniscan.core.errors import ANALYSIS_FAILED, UNSUPPORTED_FORMAT
from cliniscan.core.fingerprint import content_fingerprint
from cliniscan.core.result import (
    AnalysisError,
    AnalysisResult,
    ErrorDetails,
    FileFormat,
)
from cliniscan.core.sizes import parse_file_size, validate_file_size
from cliniscan.detection.detector import detect_format
from cliniscan.observability.hooks import AnalysisObserver
from cliniscan.policy.engine import ImportPolicyEngine
from cliniscan.utils.logger import get_logger

log = get_logger("cliniscan.engine")


class AnalysisEngine:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        observers: Optional[List[AnalysisObserver]] = None,
        policy: Optional[ImportPolicyEngine] = None,
    ):
        self.config = config or EngineConfig()
        self.policy = policy or ImportPolicyEngine()
        self._observers: List[AnalysisObserver] = list(observers or [])

    # =====================================================
    # CONFIGURATION
    # =====================================================

    def get_supported_formats(self) -> List[str]:
        return list(self.config.supported_formats)

    def update_config(self, partial: Mapping[str, Any]) -> None:
        """
        Merge `partial` into this engine's configuration.
        Not synchronized: callers serialize updates against running analyses.
        """
        self.config = self.config.merged(partial)
        log.info("Engine configuration updated: %s", self.config.to_dict())

    def parse_file_size(self, size_spec: str) -> int:
        return parse_file_size(size_spec)

    def validate_file_size(self, content: str) -> bool:
        return validate_file_size(content, self.config.max_file_size)

    # =====================================================
    # OBSERVABILITY
    # =====================================================

    def register_observer(self, observer: AnalysisObserver):
        """
        Observers must be non-blocking; their failures are logged
        and never reach the caller.
        """
        self._observers.append(observer)

    def _notify(self, result: AnalysisResult):
        for observer in self._observers:
            try:
                observer.record(result)
            except Exception:
                log.warning(
                    "Observer %s failed", type(observer).__name__, exc_info=True
                )

    # =====================================================
    # RESULTS
    # =====================================================

    def create_error_result(
        self,
        code: str,
        message: str,
        filename: str = "",
        file_format: FileFormat = FileFormat.UNKNOWN,
        error_details: Optional[ErrorDetails] = None,
    ) -> AnalysisResult:
        return AnalysisResult(
            success=False,
            format=file_format,
            filename=filename or "",
            errors=(AnalysisError(code, message),),
            warnings=(),
            error_details=error_details,
        )

    def detect_format(self, content: str, filename: str) -> Optional[FileFormat]:
        return detect_format(content, filename)

    def analyze_file_content(self, content: str, filename: str) -> AnalysisResult:
        file_format = None
        try:
            file_format = self.detect_format(content, filename)
            result = self._analyze(content, filename, file_format)
        except Exception as e:
            log.exception("Analysis of %s failed", filename)
            result = self.create_error_result(
                ANALYSIS_FAILED,
                f"Error during file analysis: {e}",
                filename=filename,
                file_format=file_format or FileFormat.UNKNOWN,
                error_details=ErrorDetails(message=str(e), filename=filename or ""),
            )

        self._notify(result)
        return result

    def _analyze(
        self, content: str, filename: str, file_format: Optional[FileFormat]
    ) -> AnalysisResult:
        log.info("Analyzing %s (%d chars)", filename, len(content))

        if file_format is None:
            log.info("Unsupported format for %s", filename)
            return self.create_error_result(
                UNSUPPORTED_FORMAT,
                f"Unsupported file format for {filename}",
                filename=filename,
            )

        outcome = get_analyzer(file_format).analyze(content, filename)
        fingerprint = content_fingerprint(content)

        if not outcome.success:
            return AnalysisResult(
                success=False,
                format=file_format,
                filename=filename,
                warnings=outcome.warnings,
                errors=outcome.errors,
                metadata=outcome.metadata,
                fingerprint=fingerprint,
            )

        decision = self.policy.evaluate(outcome)

        log.info(
            "Analyzed %s as %s: %d patients, %d visits, %d observations -> %s",
            filename,
            file_format.value,
            outcome.patients_count,
            outcome.visits_count,
            outcome.observations_count,
            decision.strategy.value,
        )

        return AnalysisResult(
            success=True,
            format=file_format,
            filename=filename,
            patients_count=outcome.patients_count,
            visits_count=outcome.visits_count,
            observations_count=outcome.observations_count,
            patients=outcome.patients[: self.config.preview_limit],
            recommended_strategy=decision.strategy,
            estimated_import_time=decision.estimated_import_time,
            warnings=outcome.warnings,
            has_multiple_patients=decision.has_multiple_patients,
            has_multiple_visits=decision.has_multiple_visits,
            metadata={
                **outcome.metadata,
                "strategy_alternatives": tuple(s.value for s in decision.alternatives),
            },
            fingerprint=fingerprint,
        )


# =====================================================
# MODULE-LEVEL CONVENIENCE
# =====================================================

default_engine = AnalysisEngine()


def analyze_file_content(content: str, filename: str) -> AnalysisResult:
    return default_engine.analyze_file_content(content, filename)


def get_supported_formats() -> List[str]:
    return default_engine.get_supported_formats()
