from __future__ import annotations

from typing import Any

from ..contracts.mutate import update_contract
from .context import ToolContext

TOOL_NAME = "sigil_update_contract"
DESCRIPTION = (
    "Apply partial updates to an existing contract. Unspecified fields are preserved. List fields are "
    "replaced wholesale. Returns a diff of what changed. Requires a prior sigil_get_contract call for "
    "this contract_id in the current session."
)


def handle(ctx: ToolContext, contract_id: str, updates: Any, changelog_message: str | None = None) -> dict[str, Any]:
    ctx.gate.require_read(TOOL_NAME, contract_id)
    result = update_contract(
        contract_id,
        updates,
        ctx.contracts_dir,
        ctx.root,
        changelog_message=changelog_message,
    )
    return result.to_payload()
