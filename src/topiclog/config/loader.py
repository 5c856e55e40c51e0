"""
Configuration file loading.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON configuration file.

    The file is expected to hold the outer configuration object, i.e. the
    logging tree lives under its ``logging`` key.

    Raises:
        FileNotFoundError: the file does not exist
        orjson.JSONDecodeError: the file is not valid JSON
    """
    data = orjson.loads(Path(path).read_bytes())
    if not isinstance(data, dict):
        # init() falls back to the builtin default for anything without a logging mapping
        return {}
    return data
