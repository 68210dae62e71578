from pathlib import Path


def decode_bytes(data: bytes) -> str:
    """
    Decode file bytes, trying utf-8-sig then utf-8.
    Latin-1 never fails and is the final fallback.
    """
    for encoding in ("utf-8-sig", "utf-8"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def read_text_file(path: Path) -> str:
    return decode_bytes(Path(path).read_bytes())
