"""
CliniScan CLI
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cliniscan.__version__ import __version__
from cliniscan.automation.batch_runner import analyze_path, build_engine, run_batch
from cliniscan.automation.file_watcher import start_watcher
from cliniscan.config.loader import load_config
from cliniscan.core.result import AnalysisResult
from cliniscan.utils.logger import set_level


def format_summary(result: AnalysisResult) -> str:
    rows = [
        ("File", result.filename),
        ("Format", result.format.value),
        ("Success", result.success),
    ]

    if result.success:
        rows += [
            ("Patients", result.patients_count),
            ("Visits", result.visits_count),
            ("Observations", result.observations_count),
            ("Strategy", result.recommended_strategy.value),
            ("Import time", result.estimated_import_time),
        ]

    lines = [f"{label + ':':<14}{value}" for label, value in rows]

    for error in result.errors:
        lines.append(f"ERROR   [{error.code}] {error.message}")
    for warning in result.warnings:
        lines.append(f"WARNING {warning}")

    return "\n".join(lines)


# -------------------------------------------------
# CLI ENTRY
# -------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description=f"CliniScan v{__version__} - analyze clinical data files before import"
    )

    parser.add_argument("input", nargs="?", help="File to analyze")
    parser.add_argument("--config", required=False, help="Path to config YAML")

    parser.add_argument("--batch", help="Analyze every file in a folder")
    parser.add_argument("--watch", help="Watch folder and analyze new files")
    parser.add_argument("--output", help="Output root for batch / watch runs")

    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--formats", action="store_true", help="List supported formats")
    parser.add_argument("--version", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    # ---- VERSION ----
    if args.version:
        print(f"CliniScan v{__version__}")
        return 0

    # ---- LOGGING ----
    # long-running modes report progress at INFO
    if args.verbose:
        set_level(logging.DEBUG)
    elif args.watch or args.batch:
        set_level(logging.INFO)
    else:
        set_level(logging.WARNING)

    config = load_config(args.config)

    # ---- FORMATS ----
    if args.formats:
        print(", ".join(config["engine_config"].supported_formats))
        return 0

    # ---- WATCH ----
    if args.watch:
        start_watcher(args.watch, args.config, args.output)
        return 0

    # ---- BATCH ----
    if args.batch:
        outcome = run_batch(args.batch, args.config, args.output)
        summary = outcome["summary"]
        print(
            f"Analyzed {summary['analyzed']} file(s): "
            f"{summary['succeeded']} succeeded, {summary['failed']} failed"
        )
        print(f"Run folder: {outcome['run_dir']}")
        return 0

    # ---- SINGLE FILE ----
    if not args.input:
        parser.error("Input file required")

    input_path = Path(args.input)
    if not input_path.exists():
        raise FileNotFoundError(input_path)

    result = analyze_path(input_path, build_engine(config))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(format_summary(result))

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
