"""MCP stdio server exposing the contract tools.

One process serves one stdio connection, so one `ToolContext` (and its
session gate) lives for the whole connection.
"""

from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp import FastMCP

from .logging import log_event
from .tools import TOOLS_BY_NAME, ToolContext, call_tool

SERVER_NAME = "sigil"


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False)


def _description(name: str) -> str:
    return TOOLS_BY_NAME[name].description


def build_server(ctx: ToolContext) -> FastMCP:
    server = FastMCP(SERVER_NAME, instructions=ctx.config.resolved_instructions())

    @server.tool(name="sigil_get_notes", description=_description("sigil_get_notes"))
    def sigil_get_notes() -> str:
        return _dumps(call_tool(ctx, "sigil_get_notes"))

    @server.tool(name="sigil_list_contracts", description=_description("sigil_list_contracts"))
    def sigil_list_contracts(domain: str | None = None, tags: list[str] | None = None) -> str:
        return _dumps(call_tool(ctx, "sigil_list_contracts", domain=domain, tags=tags))

    @server.tool(name="sigil_get_contract", description=_description("sigil_get_contract"))
    def sigil_get_contract(contract_id: str, retrieve_file_contents: bool | None = None) -> str:
        return _dumps(
            call_tool(ctx, "sigil_get_contract", contract_id=contract_id, retrieve_file_contents=retrieve_file_contents)
        )

    @server.tool(name="sigil_get_affected_contracts", description=_description("sigil_get_affected_contracts"))
    def sigil_get_affected_contracts(files: list[str]) -> str:
        return _dumps(call_tool(ctx, "sigil_get_affected_contracts", files=files))

    @server.tool(name="sigil_validate_contract", description=_description("sigil_validate_contract"))
    def sigil_validate_contract(contract_id: str) -> str:
        return _dumps(call_tool(ctx, "sigil_validate_contract", contract_id=contract_id))

    @server.tool(name="sigil_create_contract", description=_description("sigil_create_contract"))
    def sigil_create_contract(contract: dict[str, Any]) -> str:
        return _dumps(call_tool(ctx, "sigil_create_contract", contract=contract))

    @server.tool(name="sigil_update_contract", description=_description("sigil_update_contract"))
    def sigil_update_contract(contract_id: str, updates: dict[str, Any], changelog_message: str | None = None) -> str:
        return _dumps(
            call_tool(
                ctx,
                "sigil_update_contract",
                contract_id=contract_id,
                updates=updates,
                changelog_message=changelog_message,
            )
        )

    @server.tool(name="sigil_delete_contract", description=_description("sigil_delete_contract"))
    def sigil_delete_contract(contract_id: str) -> str:
        return _dumps(call_tool(ctx, "sigil_delete_contract", contract_id=contract_id))

    @server.tool(name="sigil_validate_all_contracts", description=_description("sigil_validate_all_contracts"))
    def sigil_validate_all_contracts() -> str:
        return _dumps(call_tool(ctx, "sigil_validate_all_contracts"))

    @server.tool(name="sigil_review_changeset", description=_description("sigil_review_changeset"))
    def sigil_review_changeset(files: list[str], diff: str | None = None) -> str:
        return _dumps(call_tool(ctx, "sigil_review_changeset", files=files, diff=diff))

    return server


def serve(ctx: ToolContext) -> None:
    log_event("info", "server", "serve.start", contracts_dir=ctx.contracts_dir, root=str(ctx.root))
    build_server(ctx).run(transport="stdio")
