"""Format detection: extension mapping, content sniffers, delimiter sniffing."""

from .delimiter import detect_csv_delimiter
from .detector import EXTENSION_FORMATS, SNIFF_ORDER, detect_format
from .sniffers import (
    is_csv_content,
    is_hl7_content,
    is_html_content,
    is_json_content,
)

__all__ = [
    "detect_csv_delimiter",
    "detect_format",
    "EXTENSION_FORMATS",
    "SNIFF_ORDER",
    "is_csv_content",
    "is_json_content",
    "is_hl7_content",
    "is_html_content",
]
