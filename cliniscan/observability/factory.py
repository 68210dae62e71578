from cliniscan.observability.hooks import (
    AnalysisObserver,
    ConsoleAnalysisObserver,
    FileAnalysisObserver,
)


def build_observers(config: dict) -> list[AnalysisObserver]:
    observers = []

    for obs in config.get("observers") or []:
        if obs["type"] == "console":
            observers.append(ConsoleAnalysisObserver())

        elif obs["type"] == "file":
            observers.append(
                FileAnalysisObserver(path=obs.get("path", "analysis_audit.jsonl"))
            )

        else:
            raise ValueError(f"Unknown observer type: {obs['type']}")

    return observers
