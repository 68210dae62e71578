from .factory import build_observers
from .hooks import AnalysisObserver, ConsoleAnalysisObserver, FileAnalysisObserver

__all__ = [
    "AnalysisObserver",
    "ConsoleAnalysisObserver",
    "FileAnalysisObserver",
    "build_observers",
]
