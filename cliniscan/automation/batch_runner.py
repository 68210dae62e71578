import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from cliniscan.automation.run_metadata import create_run_metadata
from cliniscan.config.loader import load_config
from cliniscan.core.errors import FILE_TOO_LARGE
from cliniscan.core.result import AnalysisResult
from cliniscan.core.sizes import parse_file_size
from cliniscan.engine import AnalysisEngine
from cliniscan.monitoring.metrics import MetricsCollector
from cliniscan.observability.factory import build_observers
from cliniscan.utils.files import read_text_file
from cliniscan.utils.logger import get_logger

log = get_logger("cliniscan.automation.batch")


def build_engine(config: Dict[str, Any]) -> AnalysisEngine:
    return AnalysisEngine(
        config=config["engine_config"],
        observers=build_observers(config),
    )


# =====================================================
# ANALYZE SINGLE FILE
# =====================================================

def analyze_path(file_path: Path, engine: AnalysisEngine) -> AnalysisResult:
    """
    Read one file from disk and analyze it.

    The size gate runs before analysis: oversized files are reported
    as FILE_TOO_LARGE without being decoded.
    """
    src = Path(file_path)
    limit = engine.config.max_file_size

    if src.stat().st_size > parse_file_size(limit):
        log.warning("Skipping %s: larger than %s", src.name, limit)
        return engine.create_error_result(
            FILE_TOO_LARGE,
            f"File exceeds the configured maximum size of {limit}",
            filename=src.name,
        )

    content = read_text_file(src)

    if not engine.validate_file_size(content):
        return engine.create_error_result(
            FILE_TOO_LARGE,
            f"File exceeds the configured maximum size of {limit}",
            filename=src.name,
        )

    return engine.analyze_file_content(content, src.name)


def write_result(result: AnalysisResult, output_dir: Path, name: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / f"{name}.analysis.json"
    out_path.write_text(json.dumps(result.to_dict(), indent=2, default=str), encoding="utf-8")
    return out_path


# =====================================================
# BATCH ENTRY POINT
# =====================================================

def run_batch(
    input_folder: str,
    config_path: Optional[str],
    output_root: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Analyze every file in a folder.

    - One timestamped run directory
    - One <name>.analysis.json per file
    - run.json with summary and metrics
    - a file that cannot be read never stops the batch
    """

    folder = Path(input_folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Input folder not found: {folder}")

    config = load_config(config_path)
    engine = build_engine(config)
    metrics = MetricsCollector()

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
    run_dir = Path(output_root or config["output_dir"]) / timestamp
    run_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(
        f for f in folder.iterdir()
        if f.is_file() and not f.name.startswith(".")
    )

    log.info("Found %d input files", len(files))
    log.info("Batch run directory: %s", run_dir)

    results: Dict[str, Dict[str, Any]] = {}
    errors = []

    for src in files:
        try:
            size = src.stat().st_size
            result = analyze_path(src, engine)
        except OSError as e:
            log.error("Could not read %s: %s", src.name, e)
            errors.append(f"{src.name}: {e}")
            continue

        metrics.observe(result, size)
        write_result(result, run_dir, src.name)
        results[src.name] = result.to_dict()

    succeeded = sum(1 for r in results.values() if r["success"])
    summary = {
        "files": len(files),
        "analyzed": len(results),
        "succeeded": succeeded,
        "failed": len(results) - succeeded,
        "unreadable": len(errors),
    }

    create_run_metadata(
        input_files=[f.name for f in files],
        config=config,
        output_dir=run_dir,
        status="completed" if not errors else "completed_with_errors",
        errors=errors,
        metrics=metrics.collect(),
        summary=summary,
    )

    log.info("Batch run completed: %s", run_dir)

    return {"run_dir": str(run_dir), "summary": summary, "results": results}
