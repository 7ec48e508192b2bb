from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .loader import LoadResult
from .model import Contract
from .schema import schema_errors


@dataclass(frozen=True)
class Issue:
    kind: str
    message: str
    contract_id: str | None = None
    file: str | None = None

    def to_payload(self) -> dict[str, object]:
        out: dict[str, object] = {"kind": self.kind, "contract_id": self.contract_id, "message": self.message}
        if self.file is not None:
            out["file"] = self.file
        return out


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[Issue, ...] = ()
    warnings: tuple[Issue, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_payload(self) -> dict[str, object]:
        return {
            "pass": self.passed,
            "errors": [issue.to_payload() for issue in self.errors],
            "warnings": [issue.to_payload() for issue in self.warnings],
        }


def expected_contract_file(contracts_dir: str, contract_id: str) -> str:
    base = contracts_dir.rstrip("/") if contracts_dir else "."
    return f"{base}/{contract_id}.contract.toml"


def declared_file_exists(root: Path, path: str) -> bool:
    """An empty declared path never exists, even though `root / ""` is the root itself."""
    return bool(path) and (root / path).exists()


def validate_contract(contract: Contract, contracts_dir: str, root: Path) -> tuple[list[Issue], list[Issue]]:
    errors: list[Issue] = []
    warnings: list[Issue] = []
    cid = contract.id

    for message in schema_errors(contract.to_json()):
        errors.append(Issue(kind="schema", contract_id=cid, message=message))

    for path in contract.all_files():
        if not declared_file_exists(root, path):
            errors.append(
                Issue(
                    kind="missing_file",
                    contract_id=cid,
                    message=f"Referenced file does not exist: '{path}'",
                    file=path,
                )
            )

    seen: set[str] = set()
    for rule in contract.rules or ():
        if rule.id in seen:
            errors.append(Issue(kind="duplicate_rule_id", contract_id=cid, message=f"Duplicate rule id: '{rule.id}'"))
        seen.add(rule.id)

    expected = expected_contract_file(contracts_dir, cid)
    if not (root / expected).exists():
        warnings.append(
            Issue(
                kind="filename_mismatch",
                contract_id=cid,
                message=f"No file found at expected path '{expected}' for contract id '{cid}'",
                file=expected,
            )
        )
    return errors, warnings


def load_warning_issues(load: LoadResult) -> list[Issue]:
    return [Issue(kind="load_warning", message=message) for message in load.warnings]


def validate_one(load: LoadResult, contract: Contract, contracts_dir: str, root: Path) -> ValidationReport:
    errors, warnings = validate_contract(contract, contracts_dir, root)
    return ValidationReport(errors=tuple(errors), warnings=tuple(load_warning_issues(load) + warnings))


def validate_all(load: LoadResult, contracts_dir: str, root: Path) -> ValidationReport:
    errors: list[Issue] = []
    warnings = load_warning_issues(load)
    for contract in load.contracts:
        contract_errors, contract_warnings = validate_contract(contract, contracts_dir, root)
        errors.extend(contract_errors)
        warnings.extend(contract_warnings)
    return ValidationReport(errors=tuple(errors), warnings=tuple(warnings))
