from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Mapping

import tomli_w

from ..errors import ContractParseError, SigilError
from ..exit_codes import ERR_VALIDATION

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]


def decode_toml(text: str) -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ContractParseError(str(exc)) from exc


def encode_toml(payload: Mapping[str, Any]) -> str:
    try:
        return tomli_w.dumps(dict(payload))
    except (TypeError, ValueError) as exc:
        raise SigilError(f"Failed to serialize contract: {exc}", ERR_VALIDATION, kind="serialize") from exc


def to_jsonable(value: Any) -> Any:
    """Convert TOML date/time values to ISO strings, recursively."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value
