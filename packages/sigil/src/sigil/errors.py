from __future__ import annotations

from dataclasses import dataclass, field

from .exit_codes import ERR_CONFIG, ERR_FAIL, ERR_INTERNAL, ERR_IO, ERR_VALIDATION, ERR_WORKFLOW


@dataclass
class SigilError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict[str, object]:
        return {"error": self.message}


@dataclass
class ContractNotFoundError(SigilError):
    code: int = ERR_FAIL
    kind: str = "not_found"


@dataclass
class ContractCollisionError(SigilError):
    code: int = ERR_FAIL
    kind: str = "collision"


@dataclass
class WorkflowError(SigilError):
    code: int = ERR_WORKFLOW
    kind: str = "workflow_order"


@dataclass
class SchemaValidationError(SigilError):
    violations: tuple[str, ...] = field(default_factory=tuple)
    code: int = ERR_VALIDATION
    kind: str = "schema"

    def to_payload(self) -> dict[str, object]:
        return {"error": self.message, "validation": list(self.violations)}


@dataclass
class ContractParseError(SigilError, ValueError):
    code: int = ERR_VALIDATION
    kind: str = "parse"


@dataclass
class GlobError(SigilError, ValueError):
    code: int = ERR_VALIDATION
    kind: str = "glob"


@dataclass
class ConfigError(SigilError):
    code: int = ERR_CONFIG
    kind: str = "config"


def io_error(message: str) -> SigilError:
    return SigilError(message, ERR_IO, kind="io")
