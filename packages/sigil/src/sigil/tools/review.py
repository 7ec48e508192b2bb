from __future__ import annotations

from typing import Any, Sequence

from ..contracts.matcher import find_affected
from .context import ToolContext, contract_summary, read_file_content

DESCRIPTION = (
    "Bundle context for a changeset review. Given changed files and optional diff, returns affected "
    "contracts with full context (contract content and file contents). The agent then performs the "
    "semantic review and produces verdicts."
)


def handle(ctx: ToolContext, files: Sequence[str], diff: str | None = None) -> dict[str, Any]:
    load = ctx.load()
    ctx.gate.mark_listed()
    matches, match_warnings = find_affected(load.contracts, files)
    warnings = [*load.warnings, *match_warnings]
    entries = []
    for match in matches:
        contract = match.contract
        contents: dict[str, Any] = {}
        for path in contract.all_files():
            entry = read_file_content(ctx.root, path)
            if entry["status"] == "missing":
                warnings.append(f"Contract '{contract.id}': missing file '{path}'")
            contents[path] = entry
        ctx.gate.mark_read(contract.id)
        row = contract_summary(contract)
        row.pop("file_count")
        row["matched_files"] = match.matched_files()
        row["contract"] = contract.to_json()
        row["file_contents"] = contents
        entries.append(row)
    payload: dict[str, Any] = {"affected_contracts": entries, "total": len(entries)}
    if diff is not None:
        payload["diff"] = diff
    payload["warnings"] = warnings
    return payload
