import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from cliniscan.automation.batch_runner import analyze_path, build_engine, write_result
from cliniscan.config.loader import load_config
from cliniscan.engine import AnalysisEngine
from cliniscan.utils.logger import get_logger

log = get_logger("cliniscan.automation.watcher")


class NewFileHandler(FileSystemEventHandler):
    def __init__(
        self,
        engine: AnalysisEngine,
        output_dir: Path,
        cooldown_seconds: float = 10,
        settle_seconds: float = 2,
    ) -> None:
        self.engine = engine
        self.output_dir = Path(output_dir)
        self.cooldown_seconds = cooldown_seconds
        self.settle_seconds = settle_seconds
        self._cooldown = {}

    def on_created(self, event) -> None:
        if event.is_directory:
            return

        path = Path(event.src_path)
        if path.name.startswith("."):
            return

        now = time.time()
        last_seen = self._cooldown.get(path.name)

        if last_seen and (now - last_seen) < self.cooldown_seconds:
            return

        self._cooldown[path.name] = now

        log.info("New file detected: %s", path.name)

        # Allow OS to finish writing file
        time.sleep(self.settle_seconds)

        self.process(path)

    def process(self, path: Path):
        try:
            result = analyze_path(path, self.engine)
        except OSError as e:
            log.error("Could not read %s: %s", path.name, e)
            return None

        out_path = write_result(result, self.output_dir, path.name)
        log.info(
            "%s analyzed (success=%s, strategy=%s) -> %s",
            path.name,
            result.success,
            result.recommended_strategy.value,
            out_path,
        )
        return result


def start_watcher(
    watch_dir: str,
    config_path: Optional[str] = None,
    output_root: Optional[str] = None,
) -> None:
    watch_dir = Path(watch_dir)

    if not watch_dir.exists():
        raise FileNotFoundError(f"Watch directory not found: {watch_dir}")

    config = load_config(config_path)
    automation = config.get("automation", {})

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
    output_dir = Path(output_root or config["output_dir"]) / f"watch_{timestamp}"

    event_handler = NewFileHandler(
        engine=build_engine(config),
        output_dir=output_dir,
        cooldown_seconds=automation.get("cooldown_seconds", 10),
        settle_seconds=automation.get("settle_seconds", 2),
    )

    observer = Observer()
    observer.schedule(event_handler, str(watch_dir), recursive=False)

    log.info("Watching folder: %s", watch_dir)
    log.info("Press CTRL+C to stop")

    observer.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
        log.info("File watcher stopped")

    observer.join()
