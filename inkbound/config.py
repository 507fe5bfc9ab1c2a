"""Runtime configuration (books location, countdown tick, HTTP host/port).

Resolution order, later wins:
  1. _CONFIG_DEFAULTS
  2. JSON config file (path argument, else INKBOUND_CONFIG)
  3. INKBOUND_<KEY> environment variables (a .env file is honoured)
"""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ENV_PREFIX = "INKBOUND_"

_CONFIG_DEFAULTS: dict[str, Any] = {
    "books_dir": "books",
    "start_book": "startmenu.json",
    "tick_seconds": 1.0,
    "http_timeout": 30.0,
    "host": "0.0.0.0",
    "port": 13015,
    "log_level": "INFO",
}


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def get_config(path: Path | None = None) -> dict[str, Any]:
    """Read config, returning defaults merged with file and environment values."""
    load_dotenv()
    config = dict(_CONFIG_DEFAULTS)

    if path is None and os.getenv(f"{ENV_PREFIX}CONFIG"):
        path = Path(os.environ[f"{ENV_PREFIX}CONFIG"])
    if path is not None and path.is_file():
        stored = json.loads(path.read_text())
        for key in _CONFIG_DEFAULTS:
            if key in stored:
                config[key] = stored[key]

    for key, default in _CONFIG_DEFAULTS.items():
        raw = os.getenv(f"{ENV_PREFIX}{key.upper()}")
        if raw is not None:
            config[key] = _coerce(raw, default)

    return config
