"""Typed contract records and their canonical mapping form."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from ..errors import ContractParseError
from .codec import to_jsonable

CONTRACT_SUFFIX = ".contract.toml"

# Declared field order of the canonical serialized form; extra keys follow.
CONTRACT_FIELDS = (
    "id",
    "version",
    "name",
    "description",
    "priority",
    "status",
    "domain",
    "tags",
    "applies_to",
    "trigger",
    "files",
    "rules",
    "notes",
    "changelog",
)


class Priority(str, Enum):
    MUST = "must"
    SHOULD = "should"
    PREFER = "prefer"


class Status(str, Enum):
    ACTIVE = "active"
    DRAFT = "draft"
    DEPRECATED = "deprecated"


def _require_str(raw: Mapping[str, Any], key: str, where: str) -> str:
    if key not in raw:
        raise ContractParseError(f"{where}: missing field `{key}`")
    value = raw[key]
    if not isinstance(value, str):
        raise ContractParseError(f"{where}: field `{key}` must be a string")
    return value


def _optional_str(raw: Mapping[str, Any], key: str, where: str) -> str | None:
    if key not in raw:
        return None
    return _require_str(raw, key, where)


def _optional_str_list(raw: Mapping[str, Any], key: str, where: str) -> tuple[str, ...] | None:
    if key not in raw:
        return None
    value = raw[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ContractParseError(f"{where}: field `{key}` must be a list of strings")
    return tuple(value)


def _optional_table_list(raw: Mapping[str, Any], key: str, where: str) -> list[Mapping[str, Any]] | None:
    if key not in raw:
        return None
    value = raw[key]
    if not isinstance(value, list):
        raise ContractParseError(f"{where}: field `{key}` must be a list of tables")
    for index, item in enumerate(value):
        if not isinstance(item, Mapping):
            raise ContractParseError(f"{where}: `{key}[{index}]` must be a table")
    return value


def _enum_value(enum_cls: type[Enum], raw: Mapping[str, Any], key: str, default: Enum, where: str) -> Any:
    if key not in raw:
        return default
    value = raw[key]
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ContractParseError(f"{where}: unknown {key} `{value}`, expected one of: {choices}") from None


@dataclass(frozen=True)
class Trigger:
    kind: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Any, where: str = "trigger") -> "Trigger":
        if not isinstance(raw, Mapping):
            raise ContractParseError(f"{where}: must be a table")
        kind = _optional_str(raw, "type", where)
        extra = {key: value for key, value in raw.items() if key != "type"}
        return cls(kind=kind, extra=extra)

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.kind is not None:
            out["type"] = self.kind
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class Rule:
    id: str
    description: str
    files: tuple[str, ...] | None = None
    constraints: tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], where: str = "rule") -> "Rule":
        return cls(
            id=_require_str(raw, "id", where),
            description=_require_str(raw, "description", where),
            files=_optional_str_list(raw, "files", where),
            constraints=_optional_str_list(raw, "constraints", where),
        )

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "description": self.description}
        if self.files is not None:
            out["files"] = list(self.files)
        if self.constraints is not None:
            out["constraints"] = list(self.constraints)
        return out


@dataclass(frozen=True)
class ChangelogEntry:
    version: str
    description: str
    date: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], where: str = "changelog") -> "ChangelogEntry":
        # A TOML date literal is kept as its ISO string.
        when = raw.get("date")
        return cls(
            version=_require_str(raw, "version", where),
            description=_require_str(raw, "description", where),
            date=when.isoformat() if isinstance(when, dt.date) else _optional_str(raw, "date", where),
        )

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {"version": self.version}
        if self.date is not None:
            out["date"] = self.date
        out["description"] = self.description
        return out


@dataclass(frozen=True)
class Contract:
    id: str
    version: str
    name: str
    description: str
    priority: Priority = Priority.MUST
    status: Status = Status.ACTIVE
    domain: str | None = None
    tags: tuple[str, ...] | None = None
    applies_to: str | tuple[str, ...] | None = None
    trigger: Trigger | None = None
    files: tuple[str, ...] | None = None
    rules: tuple[Rule, ...] | None = None
    notes: str | None = None
    changelog: tuple[ChangelogEntry, ...] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Any) -> "Contract":
        if not isinstance(raw, Mapping):
            raise ContractParseError("contract: must be a table")
        where = "contract"
        applies_to: str | tuple[str, ...] | None = None
        if "applies_to" in raw:
            value = raw["applies_to"]
            if isinstance(value, str):
                applies_to = value
            else:
                applies_to = _optional_str_list(raw, "applies_to", where)
        trigger = Trigger.from_mapping(raw["trigger"]) if "trigger" in raw else None
        rule_rows = _optional_table_list(raw, "rules", where)
        rules = None
        if rule_rows is not None:
            rules = tuple(Rule.from_mapping(row, where=f"rules[{index}]") for index, row in enumerate(rule_rows))
        log_rows = _optional_table_list(raw, "changelog", where)
        changelog = None
        if log_rows is not None:
            changelog = tuple(
                ChangelogEntry.from_mapping(row, where=f"changelog[{index}]") for index, row in enumerate(log_rows)
            )
        return cls(
            id=_require_str(raw, "id", where),
            version=_require_str(raw, "version", where),
            name=_require_str(raw, "name", where),
            description=_require_str(raw, "description", where),
            priority=_enum_value(Priority, raw, "priority", Priority.MUST, where),
            status=_enum_value(Status, raw, "status", Status.ACTIVE, where),
            domain=_optional_str(raw, "domain", where),
            tags=_optional_str_list(raw, "tags", where),
            applies_to=applies_to,
            trigger=trigger,
            files=_optional_str_list(raw, "files", where),
            rules=rules,
            notes=_optional_str(raw, "notes", where),
            changelog=changelog,
            extra={key: value for key, value in raw.items() if key not in CONTRACT_FIELDS},
        )

    def to_mapping(self) -> dict[str, Any]:
        """Canonical form: declared field order, absent optionals omitted, extras last."""
        out: dict[str, Any] = {
            "id": self.id,
            "version": self.version,
            "name": self.name,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
        }
        if self.domain is not None:
            out["domain"] = self.domain
        if self.tags is not None:
            out["tags"] = list(self.tags)
        if self.applies_to is not None:
            out["applies_to"] = self.applies_to if isinstance(self.applies_to, str) else list(self.applies_to)
        if self.trigger is not None:
            out["trigger"] = self.trigger.to_mapping()
        if self.files is not None:
            out["files"] = list(self.files)
        if self.rules is not None:
            out["rules"] = [rule.to_mapping() for rule in self.rules]
        if self.notes is not None:
            out["notes"] = self.notes
        if self.changelog is not None:
            out["changelog"] = [entry.to_mapping() for entry in self.changelog]
        for key, value in self.extra.items():
            out[key] = value
        return out

    def to_json(self) -> dict[str, Any]:
        return to_jsonable(self.to_mapping())

    @property
    def trigger_kind(self) -> str | None:
        return self.trigger.kind if self.trigger is not None else None

    def all_files(self) -> list[str]:
        """Top-level files followed by each rule's files, duplicates kept."""
        paths: list[str] = list(self.files or ())
        for rule in self.rules or ():
            paths.extend(rule.files or ())
        return paths

    def applies_to_patterns(self) -> list[str]:
        if self.applies_to is None:
            return []
        if isinstance(self.applies_to, str):
            return [self.applies_to]
        return list(self.applies_to)
