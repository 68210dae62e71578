from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


# =====================================================
# ENUMS
# =====================================================

class FileFormat(str, Enum):
    """
    Canonical serialization tags.
    UNKNOWN is only ever used on failure results.
    """
    CSV = "csv"
    JSON = "json"
    HL7 = "hl7"
    HTML = "html"
    UNKNOWN = "unknown"


class ImportStrategy(str, Enum):
    SINGLE_PATIENT = "single_patient"
    MULTIPLE_VISITS = "multiple_visits"
    MULTIPLE_PATIENTS = "multiple_patients"
    BATCH_IMPORT = "batch_import"
    INTERACTIVE = "interactive"


# Duration buckets, smallest first
IMPORT_TIME_INSTANT = "Instant"
IMPORT_TIME_UNDER_MINUTE = "< 1 minute"
IMPORT_TIME_1_2_MINUTES = "1-2 minutes"
IMPORT_TIME_2_5_MINUTES = "2-5 minutes"
IMPORT_TIME_5_15_MINUTES = "5-15 minutes"
IMPORT_TIME_15_PLUS = "15+ minutes"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _frozen_mapping(value: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    # nested lists and dicts become tuples and read-only mappings
    return _freeze(dict(value or {}))


# =====================================================
# RESULT BUILDING BLOCKS
# =====================================================

@dataclass(frozen=True)
class PatientPreview:
    id: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class AnalysisError:
    code: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class ErrorDetails:
    """
    Diagnostics attached only when an unexpected exception
    was converted into a failure result.
    """
    message: str
    filename: str
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "timestamp": self.timestamp,
            "filename": self.filename,
        }


# =====================================================
# PER-FORMAT INTERMEDIATE
# =====================================================

@dataclass(frozen=True)
class FormatAnalysisOutcome:
    """
    Raw per-format counts before strategy and timing are attached.
    Never leaves the engine.
    """
    patients_count: int = 0
    visits_count: int = 0
    observations_count: int = 0
    patients: Tuple[PatientPreview, ...] = ()
    warnings: Tuple[str, ...] = ()
    errors: Tuple[AnalysisError, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "patients", tuple(self.patients))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        object.__setattr__(self, "errors", tuple(self.errors))
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))

    @property
    def success(self) -> bool:
        return not self.errors

    @classmethod
    def failure(cls, code: str, message: str) -> "FormatAnalysisOutcome":
        return cls(errors=(AnalysisError(code, message),))


# =====================================================
# PUBLIC RESULT
# =====================================================

@dataclass(frozen=True)
class AnalysisResult:
    """
    The single value returned by an analysis call.

    Invariant: success == (errors is empty). The constructor enforces it,
    so a result can never claim success while carrying errors.
    """

    success: bool
    format: FileFormat = FileFormat.UNKNOWN
    filename: str = ""

    patients_count: int = 0
    visits_count: int = 0
    observations_count: int = 0
    patients: Tuple[PatientPreview, ...] = ()

    recommended_strategy: ImportStrategy = ImportStrategy.SINGLE_PATIENT
    estimated_import_time: str = IMPORT_TIME_INSTANT

    warnings: Tuple[str, ...] = ()
    errors: Tuple[AnalysisError, ...] = ()
    error_details: Optional[ErrorDetails] = None

    has_multiple_patients: bool = False
    has_multiple_visits: bool = False
    metadata: Mapping[str, Any] = field(default_factory=dict)
    fingerprint: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "patients", tuple(self.patients))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        object.__setattr__(self, "errors", tuple(self.errors))
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))

        if self.success == bool(self.errors):
            raise ValueError(
                "AnalysisResult.success must be True exactly when errors is empty"
            )

        for name in ("patients_count", "visits_count", "observations_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    # -----------------------------
    # SERIALIZATION
    # -----------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-ready representation using the camelCase wire names.
        """
        payload: Dict[str, Any] = {
            "success": self.success,
            "format": self.format.value,
            "filename": self.filename,
            "patientsCount": self.patients_count,
            "visitsCount": self.visits_count,
            "observationsCount": self.observations_count,
            "patients": [p.to_dict() for p in self.patients],
            "recommendedStrategy": self.recommended_strategy.value,
            "estimatedImportTime": self.estimated_import_time,
            "hasMultiplePatients": self.has_multiple_patients,
            "hasMultipleVisits": self.has_multiple_visits,
            "warnings": list(self.warnings),
            "errors": [e.to_dict() for e in self.errors],
            "metadata": _thaw(self.metadata),
            "fingerprint": self.fingerprint,
        }

        if self.error_details is not None:
            payload["errorDetails"] = self.error_details.to_dict()

        return payload

    @property
    def error_codes(self) -> List[str]:
        return [e.code for e in self.errors]
