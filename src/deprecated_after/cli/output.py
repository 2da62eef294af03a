"""CLI payload output helpers."""

from __future__ import annotations

from pathlib import Path

from ..contracts.validate import ERROR
from ..core.errors import ScriptError
from ..core.serialize import dumps_json


def emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def resolve_output_format(*, cli_json: bool, cli_format: str | None) -> str:
    if cli_json:
        return "json"
    return cli_format or "text"


def write_out_file(out_file: str | None, rendered: str) -> Path | None:
    if not out_file:
        return None
    out_path = Path(out_file)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(rendered + "\n", encoding="utf-8")
    return out_path


def render_error(error: ScriptError, *, as_json: bool, run_id: str = "") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": ERROR,
                "schema_version": 1,
                "tool": "deprecated-after",
                "status": "error",
                "run_id": run_id,
                "errors": [error.as_error_item()],
            },
            pretty=False,
        )
    return f"error: {error}"
