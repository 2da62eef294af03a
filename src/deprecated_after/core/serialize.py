"""Canonical JSON serialization for reports and inventories."""

from __future__ import annotations

import datetime as dt
import json
from enum import Enum
from pathlib import PurePath
from typing import Any


def _default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, PurePath):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def dumps_json(payload: Any, pretty: bool = False) -> str:
    indent = 2 if pretty else None
    return json.dumps(payload, indent=indent, sort_keys=True, default=_default)
