import re

# 1024-based multipliers; suffixes are case-sensitive
SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

DEFAULT_MAX_FILE_SIZE = 50 * SIZE_UNITS["MB"]

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(KB|MB|GB)\s*$")


def parse_file_size(size_spec) -> int:
    """
    Convert a size string such as "50MB" to bytes.

    Unparseable input (wrong unit, lowercase suffix, non-string)
    returns the 50 MB default instead of raising.
    """
    if not isinstance(size_spec, str):
        return DEFAULT_MAX_FILE_SIZE

    match = _SIZE_RE.match(size_spec)
    if not match:
        return DEFAULT_MAX_FILE_SIZE

    number, unit = match.groups()
    return int(float(number) * SIZE_UNITS[unit])


def content_size(content: str) -> int:
    return len(content.encode("utf-8"))


def validate_file_size(content: str, max_file_size: str) -> bool:
    return content_size(content) <= parse_file_size(max_file_size)
