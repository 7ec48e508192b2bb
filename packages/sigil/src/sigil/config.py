from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigError

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

CONFIG_FILE = "sigil.config.toml"
DEFAULT_CONTRACTS_DIR = "contracts/"

DEFAULT_INSTRUCTIONS = """\
This server manages the project's contracts: declarative rule documents stored
as TOML files. Start every task with sigil_list_contracts (or
sigil_get_affected_contracts for the files you plan to touch), read the
relevant contracts with sigil_get_contract, and only then update or delete
them. Run sigil_validate_all_contracts before finishing.
"""


@dataclass(frozen=True)
class SigilConfig:
    contracts_dir: str = DEFAULT_CONTRACTS_DIR
    instructions: str | None = None
    notes: str | None = None

    @classmethod
    def from_mapping(cls, raw: dict[str, Any], source: str = CONFIG_FILE) -> "SigilConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Failed to parse {source}: unknown field(s) {', '.join(unknown)}")
        for key, value in raw.items():
            if not isinstance(value, str):
                raise ConfigError(f"Failed to parse {source}: field `{key}` must be a string")
        return cls(**raw)

    def resolved_instructions(self) -> str:
        return self.instructions if self.instructions is not None else DEFAULT_INSTRUCTIONS

    def contracts_path(self, root: Path) -> Path:
        return root / (self.contracts_dir or ".")


def load_config(path: str | Path = CONFIG_FILE) -> SigilConfig:
    cfg_path = Path(path)
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return SigilConfig()
    except OSError as exc:
        raise ConfigError(f"Failed to read {cfg_path}: {exc}") from exc
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {cfg_path}: {exc}") from exc
    return SigilConfig.from_mapping(raw, source=str(cfg_path))
