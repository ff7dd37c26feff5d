from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from shared.protocol.errors import ConfigError
from shared.protocol.validator import validate_settings


@dataclass
class Settings:
    """Connection and runtime settings for both peers."""

    peer_host: str = "127.0.0.1"
    bind_host: str = "0.0.0.0"
    port: int = 3939
    accept_timeout: float = 10.0
    download_dir: Path = Path(".")
    log_level: str = "WARNING"


SETTINGS = Settings()

ENV_PREFIX = "CHAT_"


def load_settings(env_path: str = ".env") -> Settings:
    """Load settings from env/.env, validate them and prepare the download dir."""
    if Path(env_path).exists():
        load_dotenv(env_path)
    for item in fields(Settings):
        env_key = f"{ENV_PREFIX}{item.name.upper()}"
        raw = os.getenv(env_key)
        if raw is None:
            continue
        default_value = getattr(Settings(), item.name)
        setattr(SETTINGS, item.name, _coerce_type(raw, type(default_value)))
    SETTINGS.log_level = SETTINGS.log_level.upper()

    values = asdict(SETTINGS)
    values["download_dir"] = str(SETTINGS.download_dir)
    validate_settings(values)

    SETTINGS.download_dir.mkdir(parents=True, exist_ok=True)
    return SETTINGS


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        if issubclass(target_type, Path):
            return Path(value)
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type.__name__}") from exc


__all__ = ["Settings", "SETTINGS", "load_settings"]
