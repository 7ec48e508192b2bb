from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ContractParseError
from .codec import decode_toml
from .model import CONTRACT_SUFFIX, Contract


@dataclass(frozen=True)
class LoadResult:
    contracts: tuple[Contract, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def find(self, contract_id: str) -> Contract | None:
        for contract in self.contracts:
            if contract.id == contract_id:
                return contract
        return None


def iter_contract_files(directory: Path) -> list[Path]:
    """Contract files below `directory`, following symlinks, each real directory walked once."""
    if not directory.is_dir():
        return []
    seen: set[str] = set()
    out: list[Path] = []
    for current, dirnames, filenames in os.walk(directory, followlinks=True):
        real = os.path.realpath(current)
        if real in seen:
            dirnames[:] = []
            continue
        seen.add(real)
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(current) / name
            if name.endswith(CONTRACT_SUFFIX) and path.is_file():
                out.append(path)
    return out


def parse_contract(text: str) -> Contract:
    return Contract.from_mapping(decode_toml(text))


def load_contracts(directory: str | Path) -> LoadResult:
    contracts: list[Contract] = []
    warnings: list[str] = []
    for path in iter_contract_files(Path(directory)):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            warnings.append(f"Failed to read {path}: {exc}")
            continue
        try:
            contracts.append(parse_contract(text))
        except ContractParseError as exc:
            warnings.append(f"Failed to parse {path}: {exc}")
    contracts.sort(key=lambda contract: contract.id)
    return LoadResult(contracts=tuple(contracts), warnings=tuple(warnings))
