from typing import Any, Dict, List, Optional

from cliniscan.analyzers.base import BaseFormatAnalyzer
from cliniscan.analyzers.json_analyzer import parse_json_payload
from cliniscan.core.result import FileFormat, FormatAnalysisOutcome, PatientPreview
from cliniscan.detection.sniffers import is_composition

NO_SUBJECT_WARNING = "Clinical document has no subject - will use single patient mode"

# One document describes one encounter
VISITS_PER_DOCUMENT = 1


def _subject_preview(subject: Any) -> Optional[PatientPreview]:
    if isinstance(subject, str):
        return PatientPreview(id=subject)

    if not isinstance(subject, dict):
        return None

    identifier = subject.get("identifier")
    identifier_value = identifier.get("value") if isinstance(identifier, dict) else None

    pid = subject.get("reference") or identifier_value or subject.get("display")
    if not pid:
        return None

    return PatientPreview(id=str(pid), name=subject.get("display"))


def count_entries(sections: Any) -> int:
    """
    Total entry items across all sections, including nested sub-sections.
    Non-list sections or entries count as zero.
    """
    if not isinstance(sections, list):
        return 0

    total = 0
    for section in sections:
        if not isinstance(section, dict):
            continue
        entries = section.get("entry")
        if isinstance(entries, list):
            total += len(entries)
        total += count_entries(section.get("section"))

    return total


def _count_composition(document: Dict[str, Any]) -> FormatAnalysisOutcome:
    warnings: List[str] = []
    patients: List[PatientPreview] = []

    resource_type = document.get("resourceType")
    if resource_type is not None and resource_type != "Composition":
        warnings.append(
            f"Unexpected resourceType '{resource_type}' - analyzed as a clinical document"
        )

    subject = document.get("subject")
    if subject is None:
        warnings.append(NO_SUBJECT_WARNING)
    else:
        preview = _subject_preview(subject)
        if preview is not None:
            patients.append(preview)

    sections = document.get("section")
    if not isinstance(sections, list):
        warnings.append("Clinical document has no section array")

    metadata = {
        key: document[key]
        for key in ("title", "date", "status")
        if isinstance(document.get(key), (str, int, float))
    }

    return FormatAnalysisOutcome(
        patients_count=1 if subject is not None else 0,
        visits_count=VISITS_PER_DOCUMENT,
        observations_count=count_entries(sections),
        patients=patients,
        warnings=warnings,
        metadata=metadata,
    )


def _count_bundle(bundle: Dict[str, Any]) -> FormatAnalysisOutcome:
    entries = bundle.get("entry")
    if entries is not None and not isinstance(entries, list):
        return FormatAnalysisOutcome(
            warnings=("Bundle entry is not an array and was ignored",),
            metadata={"resource_type": "Bundle", "documents": 0},
        )

    compositions = [
        e["resource"]
        for e in entries or []
        if isinstance(e, dict) and is_composition(e.get("resource"))
    ]

    if not compositions:
        return FormatAnalysisOutcome(
            warnings=("Bundle contains no Composition resources",),
            metadata={"resource_type": "Bundle", "documents": 0},
        )

    outcomes = [_count_composition(c) for c in compositions]

    previews: Dict[str, PatientPreview] = {}
    for outcome in outcomes:
        for p in outcome.patients:
            previews.setdefault(p.id, p)

    warnings: List[str] = []
    for outcome in outcomes:
        for w in outcome.warnings:
            if w not in warnings:
                warnings.append(w)

    # Subjects without a usable identifier still count as one patient
    patients_count = len(previews)
    if not patients_count and any(o.patients_count for o in outcomes):
        patients_count = 1

    return FormatAnalysisOutcome(
        patients_count=patients_count,
        visits_count=sum(o.visits_count for o in outcomes),
        observations_count=sum(o.observations_count for o in outcomes),
        patients=list(previews.values()),
        warnings=warnings,
        metadata={"resource_type": "Bundle", "documents": len(compositions)},
    )


def count_clinical_document(document: Any) -> FormatAnalysisOutcome:
    """
    Shared counting for composition-shaped documents:
    subject -> one patient, one visit per document,
    observations = entries summed across sections.
    """
    if not isinstance(document, dict):
        return FormatAnalysisOutcome(warnings=("Clinical document is not a JSON object",))

    if document.get("resourceType") == "Bundle":
        return _count_bundle(document)

    return _count_composition(document)


class ClinicalDocumentAnalyzer(BaseFormatAnalyzer):
    """FHIR-flavored composition documents ("hl7")."""

    file_format = FileFormat.HL7

    def analyze_content(self, content: str, filename: str) -> FormatAnalysisOutcome:
        document = parse_json_payload(content, label="clinical document")
        return count_clinical_document(document)
