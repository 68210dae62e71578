from abc import ABC, abstractmethod
import json
from pathlib import Path

from cliniscan.core.result import AnalysisResult


class AnalysisObserver(ABC):
    @abstractmethod
    def record(self, result: AnalysisResult):
        pass


class ConsoleAnalysisObserver(AnalysisObserver):
    def record(self, result: AnalysisResult):
        print("[CLINISCAN ANALYSIS]")
        print(
            f"{result.filename}: format={result.format.value} "
            f"success={result.success} patients={result.patients_count} "
            f"strategy={result.recommended_strategy.value}"
        )


class FileAnalysisObserver(AnalysisObserver):
    """Appends one JSON line per analysis (audit trail)."""

    def __init__(self, path: str = "analysis_audit.jsonl"):
        self.path = Path(path)

    def record(self, result: AnalysisResult):
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(result.to_dict(), default=str) + "\n")
