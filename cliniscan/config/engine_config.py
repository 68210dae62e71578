from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

from cliniscan.core.errors import ConfigError

SUPPORTED_FORMATS: Tuple[str, ...] = ("csv", "json", "hl7", "html")

# camelCase names accepted from callers speaking the wire contract
KEY_ALIASES = {
    "maxFileSize": "max_file_size",
    "validationLevel": "validation_level",
    "previewLimit": "preview_limit",
}

READ_ONLY_KEYS = {"supported_formats", "supportedFormats"}


# -------------------------------------------------
# ENGINE CONFIG
# -------------------------------------------------
@dataclass(frozen=True)
class EngineConfig:
    """
    Per-engine configuration.

    Rules:
    - supported_formats is fixed and cannot be overridden
    - updates produce a new value via merged(); the engine swaps it in
    """
    max_file_size: str = "50MB"
    validation_level: str = "strict"
    preview_limit: int = 50
    supported_formats: Tuple[str, ...] = SUPPORTED_FORMATS

    def merged(self, partial: Mapping[str, Any]) -> "EngineConfig":
        updates: Dict[str, Any] = {}
        allowed = {f.name for f in fields(self)} - READ_ONLY_KEYS

        for key, value in (partial or {}).items():
            if key in READ_ONLY_KEYS:
                raise ConfigError(f"'{key}' is read-only")

            name = KEY_ALIASES.get(key, key)
            if name not in allowed:
                raise ConfigError(f"Unknown engine config key: '{key}'")

            updates[name] = value

        if "preview_limit" in updates:
            limit = updates["preview_limit"]
            if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
                raise ConfigError("preview_limit must be a non-negative integer")

        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxFileSize": self.max_file_size,
            "validationLevel": self.validation_level,
            "previewLimit": self.preview_limit,
            "supportedFormats": list(self.supported_formats),
        }
