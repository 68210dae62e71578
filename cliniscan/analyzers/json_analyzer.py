import json
from typing import Any, Dict, List, Mapping, Optional

from cliniscan.analyzers.base import BaseFormatAnalyzer
from cliniscan.core.errors import PayloadParseError
from cliniscan.core.result import FileFormat, FormatAnalysisOutcome, PatientPreview
from cliniscan.detection.sniffers import strip_bom

SECTION_KEYS = ("patients", "visits", "observations")

# Element fields consulted for previews, in priority order
PATIENT_ID_KEYS = ("PATIENT_CD", "id", "patientId", "patient_id", "identifier")
PATIENT_NAME_KEYS = ("name", "PATIENT_NAME", "display")

METADATA_KEYS = ("title", "source", "version", "exportDate", "author")


def parse_json_payload(content: str, label: str = "JSON") -> Any:
    try:
        return json.loads(strip_bom(content or "").strip())
    except ValueError as e:
        raise PayloadParseError(f"Invalid {label} format: {e}") from e


def _first_value(element: Mapping[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = element.get(key)
        if value not in (None, "") and not isinstance(value, (dict, list)):
            return str(value)
    return None


def patient_preview_from(element: Any) -> Optional[PatientPreview]:
    if isinstance(element, dict):
        pid = _first_value(element, PATIENT_ID_KEYS)
        if pid is None:
            return None
        return PatientPreview(id=pid, name=_first_value(element, PATIENT_NAME_KEYS))

    if isinstance(element, (str, int)) and not isinstance(element, bool):
        return PatientPreview(id=str(element))

    return None


class JsonAnalyzer(BaseFormatAnalyzer):
    """
    Counts the optional top-level patients / visits / observations arrays.
    Element shape is not validated here.
    """

    file_format = FileFormat.JSON

    def analyze_content(self, content: str, filename: str) -> FormatAnalysisOutcome:
        payload = parse_json_payload(content)

        if not isinstance(payload, dict):
            return FormatAnalysisOutcome(
                warnings=(
                    "JSON top level is not an object - no patients, visits "
                    "or observations sections found",
                ),
            )

        warnings: List[str] = []
        metadata: Dict[str, Any] = {}

        sections = payload
        if not any(k in payload for k in SECTION_KEYS) and isinstance(payload.get("data"), dict):
            sections = payload["data"]
            metadata["layout"] = "export"

        if not any(k in sections for k in SECTION_KEYS):
            warnings.append("No patients, visits or observations sections found in JSON")

        counts = {}
        for key in SECTION_KEYS:
            value = sections.get(key)
            if value is not None and not isinstance(value, list):
                warnings.append(f"'{key}' is not an array and was ignored")
            counts[key] = len(value) if isinstance(value, list) else 0

        raw_patients = sections.get("patients")
        patients = []
        for element in raw_patients if isinstance(raw_patients, list) else []:
            preview = patient_preview_from(element)
            if preview is not None:
                patients.append(preview)

        if isinstance(payload.get("metadata"), dict):
            for key in METADATA_KEYS:
                if key in payload["metadata"]:
                    metadata[key] = payload["metadata"][key]

        return FormatAnalysisOutcome(
            patients_count=counts["patients"],
            visits_count=counts["visits"],
            observations_count=counts["observations"],
            patients=patients,
            warnings=warnings,
            metadata=metadata,
        )
