import os
import time
from collections import Counter

import psutil

from cliniscan.core.result import AnalysisResult


class MetricsCollector:
    """
    Counters for one batch or watch session, plus process
    duration and resident memory at collection time.
    """

    def __init__(self):
        self.start_time = time.time()
        self.formats = Counter()
        self.error_codes = Counter()
        self.bytes_read = 0
        self.records = 0

    def observe(self, result: AnalysisResult, size_bytes: int = 0):
        self.formats[result.format.value] += 1
        self.error_codes.update(result.error_codes)
        self.bytes_read += size_bytes
        self.records += (
            result.patients_count + result.visits_count + result.observations_count
        )

    def collect(self):
        rss = psutil.Process(os.getpid()).memory_info().rss
        return {
            "duration_sec": round(time.time() - self.start_time, 2),
            "memory_mb": round(rss / 1024 / 1024, 2),
            "bytes_read": self.bytes_read,
            "records_found": self.records,
            "by_format": dict(self.formats),
            "error_codes": dict(self.error_codes),
        }
