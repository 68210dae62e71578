from pathlib import PurePath
from typing import Callable, List, Optional, Tuple

from cliniscan.core.result import FileFormat
from cliniscan.detection.sniffers import (
    is_csv_content,
    is_hl7_content,
    is_html_content,
    is_json_content,
)

# =====================================================
# EXTENSION MAP
# =====================================================

EXTENSION_FORMATS = {
    ".csv": FileFormat.CSV,
    ".json": FileFormat.JSON,
    ".hl7": FileFormat.HL7,
    ".html": FileFormat.HTML,
    ".htm": FileFormat.HTML,
}

# =====================================================
# SNIFF PRIORITY
# =====================================================
# NOTE:
# Order is fixed. JSON text can carry a comma-separated first line and
# clinical documents / survey pages are often valid JSON or HTML, so the
# first matching sniffer decides.

SNIFF_ORDER: List[Tuple[FileFormat, Callable[[str], bool]]] = [
    (FileFormat.CSV, is_csv_content),
    (FileFormat.JSON, is_json_content),
    (FileFormat.HL7, is_hl7_content),
    (FileFormat.HTML, is_html_content),
]


def format_from_extension(filename: str) -> Optional[FileFormat]:
    if not filename:
        return None
    suffix = PurePath(filename.strip()).suffix.lower()
    return EXTENSION_FORMATS.get(suffix)


def detect_format(content: str, filename: str) -> Optional[FileFormat]:
    """
    Determine the serialization format of a file.

    1. Filename extension (always wins when recognized)
    2. Content sniffing in SNIFF_ORDER
    3. None when nothing matches
    """
    by_extension = format_from_extension(filename)
    if by_extension is not None:
        return by_extension

    for file_format, sniffer in SNIFF_ORDER:
        if sniffer(content or ""):
            return file_format

    return None
