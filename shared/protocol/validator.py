from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from .errors import ConfigError

SCHEMA_DIR = Path(__file__).parent / "schemas"

# Mapping document kind -> schema filename (relative to SCHEMA_DIR)
SCHEMA_REGISTRY: Dict[str, str] = {
    "settings": "settings.json",
}


def _schema_path(kind: str) -> Optional[Path]:
    filename = SCHEMA_REGISTRY.get(kind)
    if not filename:
        return None
    path = SCHEMA_DIR / filename
    return path if path.exists() else None


@lru_cache(maxsize=16)
def load_schema(kind: str) -> Optional[dict]:
    """Load JSON schema for ``kind`` if present."""
    path = _schema_path(kind)
    if not path:
        return None
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


def validate_settings(values: Dict[str, Any], schema: Optional[dict] = None) -> None:
    """Check a plain settings mapping against the settings schema."""
    if not schema:
        schema = load_schema("settings")
    if not schema:
        raise ConfigError("Settings schema is missing")
    try:
        jsonschema.validate(instance=values, schema=schema)
    except jsonschema.ValidationError as exc:
        field = ".".join(str(part) for part in exc.absolute_path) or "settings"
        raise ConfigError(f"Invalid {field}: {exc.message}") from exc


__all__ = ["SCHEMA_DIR", "load_schema", "validate_settings"]
