from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScriptError(Exception):
    """User-facing failure; the CLI prints it and exits with `code`."""

    message: str
    code: int
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message

    def as_error_item(self) -> dict[str, object]:
        return {"code": self.code, "kind": self.kind, "message": self.message}
