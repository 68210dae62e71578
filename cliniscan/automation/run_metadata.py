import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List


def create_run_metadata(
    input_files: List[str],
    config: Dict,
    output_dir: Path,
    status: str = "completed",
    errors: List[str] | None = None,
    metrics: Dict | None = None,
    summary: Dict | None = None,
):
    """
    Create a run.json metadata file describing a batch run.
    """

    metadata = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "input_files": input_files,
        "errors": errors or [],
        "summary": summary or {},
        "metrics": metrics or {},
        "config_summary": sorted(k for k in config.keys() if k != "engine_config"),
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    metadata_path = output_dir / "run.json"

    with open(metadata_path, "w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2)

    return metadata_path
