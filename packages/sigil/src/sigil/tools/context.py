from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..config import SigilConfig
from ..contracts.loader import LoadResult, load_contracts
from ..contracts.model import Contract
from ..contracts.validate import declared_file_exists
from ..session import SessionGate


@dataclass
class ToolContext:
    config: SigilConfig
    root: Path
    gate: SessionGate = field(default_factory=SessionGate)

    @property
    def contracts_dir(self) -> str:
        return self.config.contracts_dir

    def load(self) -> LoadResult:
        return load_contracts(self.config.contracts_path(self.root))

    def file_exists(self, path: str) -> bool:
        return declared_file_exists(self.root, path)


def contract_summary(contract: Contract) -> dict[str, Any]:
    return {
        "id": contract.id,
        "version": contract.version,
        "name": contract.name,
        "description": contract.description,
        "priority": contract.priority.value,
        "status": contract.status.value,
        "domain": contract.domain,
        "tags": list(contract.tags) if contract.tags is not None else None,
        "trigger_type": contract.trigger_kind,
        "file_count": len(contract.all_files()),
    }


def read_file_content(root: Path, path: str) -> dict[str, Any]:
    if not path:
        return {"status": "missing"}
    try:
        contents = (root / path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return {"status": "missing"}
    except (OSError, UnicodeDecodeError) as exc:
        return {"status": "error", "message": str(exc)}
    return {"status": "ok", "contents": contents}
