"""Match candidate file paths against contracts.

A contract is affected by a path when the path appears verbatim in its
declared files (`direct`) or matches one of its `applies_to` globs.

Glob dialect: `*` crosses `/`, `?` is one character, `**` as a whole path
component spans zero or more components, `[...]` / `[!...]` classes, `{a,b}`
alternation (not nested), and `\\` escapes the next character.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..errors import GlobError
from .model import Contract


@dataclass(frozen=True)
class PatternMatch:
    pattern: str
    matched_files: tuple[str, ...]

    def to_payload(self) -> dict[str, object]:
        return {"pattern": self.pattern, "matched_files": list(self.matched_files)}


@dataclass(frozen=True)
class ContractMatch:
    contract: Contract
    direct: tuple[str, ...] = ()
    applies_to: tuple[PatternMatch, ...] = ()

    @property
    def affected(self) -> bool:
        return bool(self.direct or self.applies_to)

    def matched_files(self) -> list[str]:
        """Direct matches first, then glob matches, each path once."""
        out = list(self.direct)
        for group in self.applies_to:
            for path in group.matched_files:
                if path not in out:
                    out.append(path)
        return out

    def to_payload(self) -> dict[str, object]:
        return {"direct": list(self.direct), "applies_to": [group.to_payload() for group in self.applies_to]}


def normalize_paths(paths: Iterable[str]) -> list[str]:
    return [path.replace("\\", "/") for path in paths]


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    i = start + 1
    n = len(pattern)
    negate = False
    if i < n and pattern[i] in "!^":
        negate = True
        i += 1
    items: list[str] = []
    first = True
    while i < n and (pattern[i] != "]" or first):
        first = False
        lo = pattern[i]
        if i + 2 < n and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            hi = pattern[i + 2]
            if lo > hi:
                raise GlobError(f"invalid range; '{lo}' > '{hi}'")
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")
            i += 3
            continue
        items.append(re.escape(lo))
        i += 1
    if i >= n:
        raise GlobError("unclosed character class; missing ']'")
    body = "".join(items)
    return (f"[^{body}]" if negate else f"[{body}]"), i + 1


def translate_glob(pattern: str) -> str:
    out: list[str] = []
    i = 0
    n = len(pattern)
    in_alternation = False
    while i < n:
        ch = pattern[i]
        if ch == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            component_start = i == 0 or pattern[i - 1] == "/"
            component_end = j == n or pattern[j] == "/"
            if j - i == 2 and component_start and component_end:
                if j == n:
                    out.append(".*")
                    i = j
                else:
                    out.append("(?:.*/)?")
                    i = j + 1
                continue
            out.append(".*")
            i = j
            continue
        if ch == "?":
            out.append(".")
        elif ch == "[":
            translated, i = _translate_class(pattern, i)
            out.append(translated)
            continue
        elif ch == "{":
            if in_alternation:
                raise GlobError("nested alternate groups are not allowed")
            in_alternation = True
            out.append("(?:")
        elif ch == "}":
            if not in_alternation:
                raise GlobError("unopened alternate group; missing '{'")
            in_alternation = False
            out.append(")")
        elif ch == "," and in_alternation:
            out.append("|")
        elif ch == "\\":
            if i + 1 >= n:
                raise GlobError("dangling '\\'")
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(ch))
        i += 1
    if in_alternation:
        raise GlobError("unclosed alternate group; missing '}'")
    return "".join(out)


def compile_glob(pattern: str) -> re.Pattern[str]:
    return re.compile(translate_glob(pattern), re.DOTALL)


def match_contract(contract: Contract, files: Sequence[str], warnings: list[str]) -> ContractMatch:
    """Match already-normalized candidate paths; bad patterns are reported in `warnings`."""
    declared = set(contract.all_files())
    direct = tuple(path for path in files if path in declared)
    groups: list[PatternMatch] = []
    for pattern in contract.applies_to_patterns():
        try:
            compiled = compile_glob(pattern)
        except GlobError as exc:
            warnings.append(f"Contract '{contract.id}': invalid applies_to pattern '{pattern}': {exc}")
            continue
        matched = tuple(path for path in files if compiled.fullmatch(path))
        if matched:
            groups.append(PatternMatch(pattern=pattern, matched_files=matched))
    return ContractMatch(contract=contract, direct=direct, applies_to=tuple(groups))


def find_affected(contracts: Iterable[Contract], files: Iterable[str]) -> tuple[list[ContractMatch], list[str]]:
    candidates = normalize_paths(files)
    warnings: list[str] = []
    affected: list[ContractMatch] = []
    for contract in contracts:
        match = match_contract(contract, candidates, warnings)
        if match.affected:
            affected.append(match)
    return affected, warnings
