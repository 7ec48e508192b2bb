from __future__ import annotations

from typing import Any

from ..contracts.mutate import create_contract
from .context import ToolContext

DESCRIPTION = (
    "Create a new contract file. Validates the contract against the schema before writing. Derives the "
    "filename from the contract id field. Fails if a contract with that id already exists."
)


def handle(ctx: ToolContext, contract: Any) -> dict[str, Any]:
    return create_contract(contract, ctx.contracts_dir, ctx.root).to_payload()
