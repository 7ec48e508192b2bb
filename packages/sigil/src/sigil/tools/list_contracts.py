from __future__ import annotations

from typing import Any, Sequence

from ..contracts.model import Contract
from .context import ToolContext, contract_summary

DESCRIPTION = (
    "List all contracts with summary info. Starting point for planning. Supports optional filtering "
    "by domain and/or tags. Call this before sigil_get_contract."
)


def matches_filters(contract: Contract, domain: str | None, tags: Sequence[str] | None) -> bool:
    if domain is not None and contract.domain != domain:
        return False
    if tags is not None:
        own = set(contract.tags or ())
        if not any(tag in own for tag in tags):
            return False
    return True


def handle(ctx: ToolContext, domain: str | None = None, tags: Sequence[str] | None = None) -> dict[str, Any]:
    load = ctx.load()
    ctx.gate.mark_listed()
    warnings = list(load.warnings)
    summaries = []
    for contract in load.contracts:
        if not matches_filters(contract, domain, tags):
            continue
        for path in contract.all_files():
            if not ctx.file_exists(path):
                warnings.append(f"Contract '{contract.id}': missing file '{path}'")
        summaries.append(contract_summary(contract))
    return {"contracts": summaries, "total": len(summaries), "warnings": warnings}
