import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple


# =====================================================
# HEADER PATTERN
# =====================================================

@dataclass(frozen=True)
class HeaderPattern:
    """
    Case-insensitive predicate over a single header cell.

    - all_of: every fragment must occur in the normalized header
    - none_of: no fragment may occur
    - exact: the normalized header must equal the single fragment
    """
    all_of: Tuple[str, ...]
    none_of: Tuple[str, ...] = ()
    exact: bool = False

    def matches(self, header: str) -> bool:
        name = normalize_header(header)
        if not name:
            return False

        if self.exact:
            return name == " ".join(self.all_of)

        if any(fragment in name for fragment in self.none_of):
            return False

        return all(fragment in name for fragment in self.all_of)


def normalize_header(header: str) -> str:
    """'Patient_ID ' -> 'patient id'"""
    if header is None:
        return ""
    return " ".join(re.split(r"[^0-9a-z]+", str(header).lower())).strip()


# =====================================================
# SEMANTIC HEADER TABLE
# =====================================================
# Patterns are evaluated in order; the first pattern that matches
# any header wins, so more specific patterns come first.

SEMANTIC_HEADER_PATTERNS: Dict[str, List[HeaderPattern]] = {
    # ---------- Patient identity ----------
    "patient_id": [
        HeaderPattern(("patient", "id"), none_of=("name",)),
        HeaderPattern(("patient", "cd")),
        HeaderPattern(("patient", "num")),
        HeaderPattern(("patient", "nr")),
        HeaderPattern(("mrn",)),
        HeaderPattern(("pid",), exact=True),
        HeaderPattern(("patient",), exact=True),
    ],
    "patient_name": [
        HeaderPattern(("patient", "name")),
        HeaderPattern(("full", "name")),
        HeaderPattern(("name",), exact=True),
        HeaderPattern(("name",), none_of=("field", "char", "concept", "code")),
    ],

    # ---------- Visit grouping ----------
    "visit_id": [
        HeaderPattern(("visit", "id")),
        HeaderPattern(("encounter", "id")),
        HeaderPattern(("encounter", "num")),
        HeaderPattern(("visit", "num")),
        HeaderPattern(("visit", "nr")),
        HeaderPattern(("encounter",), exact=True),
        HeaderPattern(("visit",), exact=True),
    ],
    "visit_date": [
        HeaderPattern(("visit", "date")),
        HeaderPattern(("encounter", "date")),
        HeaderPattern(("admission", "date")),
        HeaderPattern(("start", "date")),
        HeaderPattern(
            ("date",),
            none_of=("birth", "death", "update", "download", "import", "export"),
        ),
    ],
}


# =====================================================
# RESOLUTION ENGINE
# =====================================================

def resolve_header(
    headers: Sequence[str],
    semantic_key: str,
    exclude: Sequence[int] = (),
) -> Optional[int]:
    """
    Resolve a semantic header key to a column index.

    Resolution strategy:
    1. Walk SEMANTIC_HEADER_PATTERNS[semantic_key] in order
    2. For each pattern, return the first header (left to right) it matches
    3. Columns listed in `exclude` are never returned

    Returns:
        Column index if resolved, else None
    """
    if not headers or semantic_key not in SEMANTIC_HEADER_PATTERNS:
        return None

    for pattern in SEMANTIC_HEADER_PATTERNS[semantic_key]:
        for idx, header in enumerate(headers):
            if idx in exclude:
                continue
            if pattern.matches(header):
                return idx

    return None


def resolve_columns(headers: Sequence[str]) -> Dict[str, Optional[int]]:
    """
    Resolve every semantic key, never assigning one column to two roles.
    """
    resolved: Dict[str, Optional[int]] = {}
    taken: List[int] = []

    for key in SEMANTIC_HEADER_PATTERNS:
        idx = resolve_header(headers, key, exclude=taken)
        resolved[key] = idx
        if idx is not None:
            taken.append(idx)

    return resolved
