"""
Runtime settings read from the environment.

A `.env` file in the working directory (or the path given to
load_settings) is loaded first, so values can live there instead of being
exported by hand.

    VSGRAPH_LOG_LEVEL   logging level name            (INFO)
    VSGRAPH_STRICT      reject ambiguous/unwired inputs (false)
    VSGRAPH_HOST        API bind address              (127.0.0.1)
    VSGRAPH_PORT        API port                      (3001)
    VSGRAPH_OUTPUT_DIR  CLI output directory          (compiled)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    strict: bool = False
    host: str = "127.0.0.1"
    port: int = 3001
    output_dir: str = "compiled"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_settings(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file or find_dotenv(usecwd=True))
    defaults = Settings()
    port = os.environ.get("VSGRAPH_PORT")
    try:
        port_value = int(port) if port else defaults.port
    except ValueError:
        raise ValueError(f"VSGRAPH_PORT must be an integer, got {port!r}") from None
    log_level = os.environ.get("VSGRAPH_LOG_LEVEL", defaults.log_level).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"VSGRAPH_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}")
    return Settings(
        log_level=log_level,
        strict=_env_flag("VSGRAPH_STRICT", defaults.strict),
        host=os.environ.get("VSGRAPH_HOST", defaults.host),
        port=port_value,
        output_dir=os.environ.get("VSGRAPH_OUTPUT_DIR", defaults.output_dir),
    )
