"""Shared runtime plumbing: context, errors, logging, scanning."""
from .clock import utc_now_iso, utc_today
from .context import RunContext
from .errors import ScriptError
from .logging import log_event
from .paths import find_project_root, try_find_project_root
from .serialize import dumps_json

__all__ = [
    "RunContext",
    "ScriptError",
    "dumps_json",
    "find_project_root",
    "log_event",
    "try_find_project_root",
    "utc_now_iso",
    "utc_today",
]
