from __future__ import annotations

from typing import Any, Sequence

from ..contracts.matcher import find_affected
from .context import ToolContext, contract_summary

DESCRIPTION = (
    "Given a list of file paths, return all contracts that care about those files via files, "
    "applies_to glob patterns, or matching rules. Use this during planning to understand contract "
    "implications of a change."
)


def handle(ctx: ToolContext, files: Sequence[str]) -> dict[str, Any]:
    load = ctx.load()
    ctx.gate.mark_listed()
    matches, match_warnings = find_affected(load.contracts, files)
    contracts = []
    for match in matches:
        summary = contract_summary(match.contract)
        summary["matched_files"] = match.to_payload()
        contracts.append(summary)
    return {"contracts": contracts, "total": len(contracts), "warnings": [*load.warnings, *match_warnings]}
