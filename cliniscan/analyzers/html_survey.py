import json
import re
from dataclasses import replace
from typing import Any, Dict, List, Optional

from cliniscan.analyzers.base import BaseFormatAnalyzer
from cliniscan.analyzers.clinical_document import count_clinical_document
from cliniscan.core.errors import PayloadParseError
from cliniscan.core.result import FileFormat, FormatAnalysisOutcome

NO_SURVEY_WARNING = "No embedded survey data found in HTML - nothing to import"

# Assignments that hold the survey payload, tried in order
SURVEY_MARKERS = [
    re.compile(r"\bCDA\s*=\s*", re.IGNORECASE),
    re.compile(r"\bwindow\.surveyData\s*=\s*"),
    re.compile(r"\bwindow\.questionnaireData\s*=\s*"),
]

_SCRIPT_RE = re.compile(r"<script[^>]*>(.*?)</script\s*>", re.IGNORECASE | re.DOTALL)


# =====================================================
# TEXTUAL EXTRACTION
# =====================================================

def extract_balanced_object(text: str, start: int = 0) -> Optional[str]:
    """
    Return the brace-balanced {...} substring beginning at the first '{'
    at or after `start`. Braces inside quoted strings are ignored and
    backslash escapes are honored. None if the object never closes.
    """
    open_at = text.find("{", start)
    if open_at == -1:
        return None

    depth = 0
    quote = None
    escaped = False

    for i in range(open_at, len(text)):
        ch = text[i]

        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue

        if ch in ('"', "'"):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[open_at:i + 1]

    return None


def script_blocks(html: str) -> List[str]:
    blocks = _SCRIPT_RE.findall(html)
    # Unterminated markup: fall back to scanning the whole page
    return blocks or [html]


def find_survey_payload(html: str) -> Optional[str]:
    for block in script_blocks(html):
        for marker in SURVEY_MARKERS:
            for match in marker.finditer(block):
                # the assigned value must be an object literal
                rest = block[match.end():].lstrip()
                if not rest.startswith("{"):
                    continue
                candidate = extract_balanced_object(block, match.end())
                if candidate is not None:
                    return candidate
    return None


def _survey_metadata(payload: Dict[str, Any], document: Any) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {"has_survey_data": True}

    info = payload.get("info")
    if isinstance(info, dict):
        for key in ("label", "title", "PID"):
            if isinstance(info.get(key), (str, int)):
                metadata[f"survey_{key.lower()}"] = info[key]

    if isinstance(document, dict) and isinstance(document.get("title"), str):
        metadata["title"] = document["title"]

    return metadata


class HtmlSurveyAnalyzer(BaseFormatAnalyzer):
    """
    Survey exports: an HTML page whose script assigns a clinical
    document to a known variable. Extraction is purely textual.
    """

    file_format = FileFormat.HTML

    def analyze_content(self, content: str, filename: str) -> FormatAnalysisOutcome:
        raw = find_survey_payload(content or "")

        if raw is None:
            return FormatAnalysisOutcome(
                warnings=(NO_SURVEY_WARNING,),
                metadata={"has_survey_data": False},
            )

        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise PayloadParseError(f"Failed to parse embedded survey data: {e}") from e

        document = payload.get("cda") if isinstance(payload.get("cda"), dict) else payload
        outcome = count_clinical_document(document)

        metadata = dict(outcome.metadata)
        metadata.update(_survey_metadata(payload, document))

        return replace(outcome, metadata=metadata)
