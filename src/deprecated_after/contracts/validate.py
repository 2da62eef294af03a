from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

from ..core.errors import ScriptError
from ..core.exit_codes import ERR_VALIDATION
from .schemas import schemas_root

REPORT = "deprecated-after.report.v1"
INVENTORY = "deprecated-after.inventory.v1"
ERROR = "deprecated-after.error.v1"
CONFIG = "deprecated-after.config.v1"


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    version: int
    file: str


@lru_cache(maxsize=1)
def load_catalog() -> dict[str, CatalogEntry]:
    raw = json.loads((schemas_root() / "catalog.json").read_text(encoding="utf-8"))
    return {
        row["name"]: CatalogEntry(name=row["name"], version=int(row["version"]), file=row["file"])
        for row in raw.get("schemas", [])
    }


def schema_path(schema_name: str) -> Path:
    entry = load_catalog().get(schema_name)
    if entry is None:
        raise ScriptError(f"unknown schema: {schema_name}", ERR_VALIDATION, kind="unknown_schema")
    rel = Path(entry.file)
    if rel.is_absolute() or ".." in rel.parts:
        raise ScriptError(f"schema {schema_name} points outside the schema directory: {entry.file}", ERR_VALIDATION, kind="unknown_schema")
    return schemas_root() / rel


@lru_cache(maxsize=None)
def _validator(schema_name: str) -> jsonschema.Draft202012Validator:
    schema = json.loads(schema_path(schema_name).read_text(encoding="utf-8"))
    if schema.get("$id") != schema_name:
        raise ScriptError(f"schema file for {schema_name} declares $id {schema.get('$id')!r}", ERR_VALIDATION, kind="unknown_schema")
    jsonschema.Draft202012Validator.check_schema(schema)
    return jsonschema.Draft202012Validator(schema)


def validate(schema_name: str, payload: Any, *, code: int = ERR_VALIDATION, kind: str = "schema_validation") -> None:
    errors = sorted(_validator(schema_name).iter_errors(payload), key=lambda err: [str(p) for p in err.absolute_path])
    if not errors:
        return
    first = errors[0]
    loc = "/".join(str(p) for p in first.absolute_path) or "<root>"
    raise ScriptError(f"schema validation failed for {schema_name} at {loc}: {first.message}", code, kind=kind)


def validate_self(schema_name: str, payload: dict[str, Any]) -> dict[str, Any]:
    validate(schema_name, payload)
    return payload
