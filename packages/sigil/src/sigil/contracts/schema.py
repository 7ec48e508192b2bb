from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema


def schemas_root() -> Path:
    return Path(__file__).resolve().parent / "schemas"


def contract_schema_path() -> Path:
    return schemas_root() / "contract.schema.json"


@lru_cache(maxsize=1)
def contract_schema() -> dict[str, Any]:
    return json.loads(contract_schema_path().read_text(encoding="utf-8"))


@lru_cache(maxsize=1)
def _validator() -> jsonschema.protocols.Validator:
    schema = contract_schema()
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _location(error: jsonschema.ValidationError) -> str:
    pointer = "/".join(str(part) for part in error.absolute_path)
    return f"/{pointer}" if pointer else "<root>"


def schema_errors(instance: Any) -> list[str]:
    """Every schema violation of `instance`, ordered by instance path."""
    errors = sorted(_validator().iter_errors(instance), key=lambda err: [str(part) for part in err.absolute_path])
    return [f"{error.message} at '{_location(error)}'" for error in errors]
