from __future__ import annotations

from typing import Any

from ..contracts.mutate import delete_contract
from .context import ToolContext

TOOL_NAME = "sigil_delete_contract"
DESCRIPTION = (
    "Delete a contract. Requires a prior sigil_get_contract call for this contract_id in the current session."
)


def handle(ctx: ToolContext, contract_id: str) -> dict[str, Any]:
    ctx.gate.require_read(TOOL_NAME, contract_id)
    return {"deleted": delete_contract(contract_id, ctx.contracts_dir, ctx.root)}
