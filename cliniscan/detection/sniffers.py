"""
Content sniffers.

Pure predicates over raw text. They never raise and hold no state;
the format detector decides which one wins when several match.
"""

import json
from typing import Any, List, Optional

from cliniscan.detection.delimiter import detect_csv_delimiter

COMPOSITION_RESOURCE_TYPES = {"Composition"}
CLINICAL_DOCUMENT_TAGS = ("<ClinicalDocument", "<hl7:")
HTML_MARKERS = ("<html", "<!doctype html", "<script")

_BOM = "\ufeff"


def strip_bom(content: str) -> str:
    return content[1:] if content.startswith(_BOM) else content


def try_parse_json(content: str) -> Optional[Any]:
    """
    Parse a whole document as JSON.
    Returns None unless the top level is an object or array.
    """
    text = strip_bom(content or "").strip()
    if not text or text[0] not in "{[":
        return None

    try:
        parsed = json.loads(text)
    except ValueError:
        return None

    return parsed if isinstance(parsed, (dict, list)) else None


def _table_lines(content: str) -> List[str]:
    """Non-blank lines that are not '#' comments."""
    return [
        line.strip()
        for line in strip_bom(content or "").splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


# =====================================================
# SNIFFERS
# =====================================================

def is_csv_content(content: str) -> bool:
    """
    A header line with at least two delimited fields, followed by at
    least one more line. A single line of prose is never CSV.
    """
    lines = _table_lines(content)
    if len(lines) < 2:
        return False

    first_line = lines[0]
    if first_line[0] in "{[<":
        return False

    delimiter = detect_csv_delimiter(first_line)
    if delimiter not in first_line:
        return False

    fields = [f.strip() for f in first_line.split(delimiter)]
    return sum(1 for f in fields if f) >= 2


def is_json_content(content: str) -> bool:
    return try_parse_json(content) is not None


def is_composition(document: Any) -> bool:
    if not isinstance(document, dict):
        return False

    resource_type = document.get("resourceType")
    if resource_type in COMPOSITION_RESOURCE_TYPES:
        return True

    if resource_type == "Bundle":
        entries = document.get("entry")
        if isinstance(entries, list):
            return any(
                isinstance(e, dict) and is_composition(e.get("resource"))
                for e in entries
            )

    return False


def is_hl7_content(content: str) -> bool:
    if is_composition(try_parse_json(content)):
        return True

    text = content or ""
    return any(tag in text for tag in CLINICAL_DOCUMENT_TAGS)


def is_html_content(content: str) -> bool:
    text = (content or "").lower()

    if any(marker in text for marker in HTML_MARKERS):
        return True

    return "<head" in text and "<body" in text
