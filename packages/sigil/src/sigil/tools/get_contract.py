from __future__ import annotations

from typing import Any

from ..errors import ContractNotFoundError
from .context import ToolContext, read_file_content

TOOL_NAME = "sigil_get_contract"
DESCRIPTION = (
    "Retrieve a single contract by id with full detail. When retrieve_file_contents is true, includes "
    "the file contents of all files referenced in the contract. Requires a prior sigil_list_contracts "
    "or sigil_get_affected_contracts call in the current session."
)


def handle(ctx: ToolContext, contract_id: str, retrieve_file_contents: bool | None = None) -> dict[str, Any]:
    ctx.gate.require_listed(TOOL_NAME, contract_id)
    load = ctx.load()
    contract = load.find(contract_id)
    if contract is None:
        raise ContractNotFoundError(f"Contract '{contract_id}' not found")
    ctx.gate.mark_read(contract_id)

    warnings = list(load.warnings)
    payload: dict[str, Any] = {"contract": contract.to_json()}
    if retrieve_file_contents:
        contents: dict[str, Any] = {}
        for path in contract.all_files():
            entry = read_file_content(ctx.root, path)
            if entry["status"] == "missing":
                warnings.append(f"Missing file: '{path}'")
            elif entry["status"] == "error":
                warnings.append(f"Error reading file '{path}': {entry['message']}")
            contents[path] = entry
        payload["file_contents"] = contents
    else:
        for path in contract.all_files():
            if not ctx.file_exists(path):
                warnings.append(f"Missing file: '{path}'")
    payload["warnings"] = warnings
    return payload
