from __future__ import annotations

from typing import Any

from ..contracts.validate import validate_all, validate_one
from ..errors import ContractNotFoundError
from .context import ToolContext

VALIDATE_ONE_DESCRIPTION = (
    "Validate a contract: checks schema compliance, missing files, and structural correctness. "
    "Returns pass/fail with categorized errors and warnings."
)
VALIDATE_ALL_DESCRIPTION = (
    "Fast validation of all contracts: checks missing files and schema validation errors. "
    "Returns pass/fail boolean plus categorized errors and warnings."
)


def handle_one(ctx: ToolContext, contract_id: str) -> dict[str, Any]:
    load = ctx.load()
    contract = load.find(contract_id)
    if contract is None:
        raise ContractNotFoundError(f"Contract '{contract_id}' not found")
    return validate_one(load, contract, ctx.contracts_dir, ctx.root).to_payload()


def handle_all(ctx: ToolContext) -> dict[str, Any]:
    return validate_all(ctx.load(), ctx.contracts_dir, ctx.root).to_payload()
