"""
Logging helpers.

Sets up the root logger format and renders payloads for diagnostic dumps.
"""

import dataclasses
import json
import logging
from datetime import datetime
from enum import Enum
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with the standard format."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _json_default(obj: Any) -> Any:
    """JSON serializer for objects not handled by default json encoder."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def prettify(obj: Any) -> str:
    """
    Render ``obj`` as indented JSON for log output.

    Falls back to ``repr`` for values JSON cannot express.
    """
    try:
        return json.dumps(obj, indent=2, sort_keys=True, default=_json_default)
    except (TypeError, ValueError):
        return repr(obj)
