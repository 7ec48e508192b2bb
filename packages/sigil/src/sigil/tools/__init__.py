"""Tool adapters: typed parameters in, JSON-serializable payload out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..errors import SigilError
from ..logging import log_event
from . import affected, create, delete, get_contract, list_contracts, notes, review, update, validate
from .context import ToolContext


@dataclass(frozen=True)
class ToolSpec:
    name: str
    handler: Callable[..., dict[str, Any]]
    description: str


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("sigil_get_notes", notes.handle, notes.DESCRIPTION),
    ToolSpec("sigil_list_contracts", list_contracts.handle, list_contracts.DESCRIPTION),
    ToolSpec("sigil_get_contract", get_contract.handle, get_contract.DESCRIPTION),
    ToolSpec("sigil_get_affected_contracts", affected.handle, affected.DESCRIPTION),
    ToolSpec("sigil_validate_contract", validate.handle_one, validate.VALIDATE_ONE_DESCRIPTION),
    ToolSpec("sigil_create_contract", create.handle, create.DESCRIPTION),
    ToolSpec("sigil_update_contract", update.handle, update.DESCRIPTION),
    ToolSpec("sigil_delete_contract", delete.handle, delete.DESCRIPTION),
    ToolSpec("sigil_validate_all_contracts", validate.handle_all, validate.VALIDATE_ALL_DESCRIPTION),
    ToolSpec("sigil_review_changeset", review.handle, review.DESCRIPTION),
)

TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}


def call_tool(ctx: ToolContext, name: str, **params: Any) -> dict[str, Any]:
    """Run one tool; expected failures come back in-band as `{"error": ...}`."""
    spec = TOOLS_BY_NAME.get(name)
    if spec is None:
        return {"error": f"unknown tool {name}"}
    log_event("debug", "tools", "tool.call", tool=name)
    try:
        return spec.handler(ctx, **params)
    except SigilError as exc:
        log_event("warn", "tools", "tool.error", tool=name, kind=exc.kind, message=exc.message)
        return exc.to_payload()


__all__ = ["TOOLS", "TOOLS_BY_NAME", "ToolContext", "ToolSpec", "call_tool"]
