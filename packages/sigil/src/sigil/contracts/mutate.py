"""Create, update and delete contract files.

Every mutation validates before it writes: a schema failure or an id collision
leaves the contracts directory untouched.
"""

from __future__ import annotations

import contextlib
import difflib
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Mapping

from ..errors import (
    ContractCollisionError,
    ContractNotFoundError,
    ContractParseError,
    SchemaValidationError,
    SigilError,
    io_error,
)
from ..exit_codes import ERR_VALIDATION
from ..logging import log_event
from .codec import decode_toml, encode_toml, to_jsonable
from .model import Contract
from .schema import schema_errors
from .validate import declared_file_exists, expected_contract_file

NO_CHANGES = "(no changes)"
DEFAULT_CHANGELOG_VERSION = "0.0.0"

# Split on "\n" only; str.splitlines also breaks on U+2028, form feeds and others.
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")


@dataclass(frozen=True)
class CreateResult:
    path: str
    warnings: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        return {"path": self.path, "warnings": list(self.warnings)}


@dataclass(frozen=True)
class UpdateResult:
    path: str
    diff: str
    warnings: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        return {"path": self.path, "diff": self.diff, "warnings": list(self.warnings)}


def _require_schema(payload: Any) -> None:
    violations = schema_errors(to_jsonable(payload))
    if violations:
        raise SchemaValidationError("Schema validation failed", violations=tuple(violations))


def _canonical_toml(raw: Mapping[str, Any]) -> tuple[Contract, str]:
    try:
        contract = Contract.from_mapping(raw)
    except ContractParseError as exc:
        raise SigilError(f"Failed to serialize contract: {exc}", ERR_VALIDATION, kind="serialize") from exc
    return contract, encode_toml(contract.to_mapping())


def _write(root: Path, rel: str, text: str) -> None:
    target = root / rel
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise io_error(f"Failed to write '{rel}': {exc}") from exc


def missing_file_warnings(contract: Contract, root: Path, template: str) -> list[str]:
    return [template.format(path=path) for path in contract.all_files() if not declared_file_exists(root, path)]


def render_diff(old: str, new: str) -> str:
    """Changed lines only: `-` for removed, `+` for added."""
    old_lines = _LINE_RE.findall(old)
    new_lines = _LINE_RE.findall(new)
    out: list[str] = []
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag in ("replace", "delete"):
            out.extend(f"-{line}" if line.endswith("\n") else f"-{line}\n" for line in old_lines[i1:i2])
        if tag in ("replace", "insert"):
            out.extend(f"+{line}" if line.endswith("\n") else f"+{line}\n" for line in new_lines[j1:j2])
    return "".join(out) or NO_CHANGES


def create_contract(raw: Any, contracts_dir: str, root: Path) -> CreateResult:
    _require_schema(raw)
    contract_id = raw.get("id") if isinstance(raw, Mapping) else None
    if not isinstance(contract_id, str):
        raise SigilError("Contract must have an 'id' field", ERR_VALIDATION, kind="usage")

    rel = expected_contract_file(contracts_dir, contract_id)
    if (root / rel).exists():
        raise ContractCollisionError(
            f"Contract '{contract_id}' already exists at '{rel}'. Use sigil_update_contract to modify it."
        )

    contract, text = _canonical_toml(raw)
    _write(root, rel, text)
    log_event("info", "mutate", "contract.create", contract_id=contract_id, path=rel)
    warnings = missing_file_warnings(contract, root, "File does not exist yet: '{path}'")
    return CreateResult(path=rel, warnings=tuple(warnings))


def merge_updates(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow merge: each updated key replaces the base value wholesale."""
    merged = dict(base)
    merged.update(updates)
    return merged


def append_changelog(merged: dict[str, Any], message: str, today: date) -> None:
    version = merged.get("version")
    entry = {
        "version": version if isinstance(version, str) else DEFAULT_CHANGELOG_VERSION,
        "date": today.isoformat(),
        "description": message,
    }
    existing = merged.get("changelog")
    if isinstance(existing, list):
        merged["changelog"] = [*existing, entry]
    else:
        merged["changelog"] = [entry]


def update_contract(
    contract_id: str,
    updates: Any,
    contracts_dir: str,
    root: Path,
    changelog_message: str | None = None,
    today: date | None = None,
) -> UpdateResult:
    old_rel = expected_contract_file(contracts_dir, contract_id)
    try:
        old_text = (root / old_rel).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ContractNotFoundError(
            f"Contract '{contract_id}' not found. Use sigil_create_contract to create it."
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise io_error(f"Failed to read '{old_rel}': {exc}") from exc

    try:
        base = decode_toml(old_text)
    except ContractParseError as exc:
        raise SigilError(f"Failed to parse existing contract: {exc}", ERR_VALIDATION, kind="parse") from exc
    if not isinstance(updates, Mapping):
        raise SigilError("'updates' must be a JSON object", ERR_VALIDATION, kind="usage")

    merged = merge_updates(base, updates)
    if changelog_message is not None:
        append_changelog(merged, changelog_message, today or date.today())
    _require_schema(merged)

    new_id = merged.get("id")
    if not isinstance(new_id, str):
        new_id = contract_id
    new_rel = expected_contract_file(contracts_dir, new_id)
    renamed = new_id != contract_id
    if renamed and (root / new_rel).exists():
        raise ContractCollisionError(
            f"Cannot rename to '{new_id}': a contract with that id already exists at '{new_rel}'."
        )

    contract, new_text = _canonical_toml(merged)
    _write(root, new_rel, new_text)
    if renamed:
        with contextlib.suppress(OSError):
            (root / old_rel).unlink()
    log_event("info", "mutate", "contract.update", contract_id=contract_id, new_id=new_id, path=new_rel)

    warnings = missing_file_warnings(contract, root, "File does not exist: '{path}'")
    return UpdateResult(path=new_rel, diff=render_diff(old_text, new_text), warnings=tuple(warnings))


def delete_contract(contract_id: str, contracts_dir: str, root: Path) -> str:
    rel = expected_contract_file(contracts_dir, contract_id)
    try:
        (root / rel).unlink()
    except FileNotFoundError as exc:
        raise ContractNotFoundError(f"Contract '{contract_id}' not found at '{rel}'") from exc
    except OSError as exc:
        raise io_error(f"Failed to delete '{rel}': {exc}") from exc
    log_event("info", "mutate", "contract.delete", contract_id=contract_id, path=rel)
    return rel
