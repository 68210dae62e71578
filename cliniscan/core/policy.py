from dataclasses import dataclass
from typing import List

from cliniscan.core.result import ImportStrategy


@dataclass(frozen=True)
class ImportPolicyDecision:
    strategy: ImportStrategy
    estimated_import_time: str
    alternatives: List[ImportStrategy]  # caller-selectable, never the default
    reasons: List[str]
    has_multiple_patients: bool = False
    has_multiple_visits: bool = False
