"""On-demand decoding of a single module payload."""

from __future__ import annotations

from pydantic import ValidationError

from amodinfo.errors import DecodeError
from amodinfo.modinfo.types import LegacyModuleRecord, ModuleRecord

# Schema revisions of module-info.json. New revisions are added here.
SCHEMAS: dict[str, type[ModuleRecord]] = {
    "v1": LegacyModuleRecord,
    "v2": ModuleRecord,
}
DEFAULT_SCHEMA = "v2"


def get_schema(schema: str) -> type[ModuleRecord]:
    try:
        return SCHEMAS[schema]
    except KeyError:
        known = ", ".join(sorted(SCHEMAS))
        raise ValueError(f"unknown module-info schema {schema!r} (known: {known})") from None


def _describe(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(item) for item in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else str(error["msg"]))
    return "; ".join(parts)


def decode(
    payload: str,
    *,
    schema: str = DEFAULT_SCHEMA,
    name: str | None = None,
    lineno: int | None = None,
) -> ModuleRecord:
    """Decode one payload into a module record.

    Unknown keys are ignored. Optional fields missing from the payload
    decode to empty lists; a missing required field is a DecodeError.
    `name` and `lineno` only enrich the error for diagnostics.
    """
    model = get_schema(schema)
    try:
        return model.model_validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(_describe(exc), name=name, lineno=lineno) from exc
