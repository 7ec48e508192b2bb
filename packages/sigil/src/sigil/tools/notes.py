from __future__ import annotations

from typing import Any

from .context import ToolContext

DESCRIPTION = (
    "Return global project notes from the config file. Notes contain project-specific conventions "
    "and context that apply across all contracts."
)


def handle(ctx: ToolContext) -> dict[str, Any]:
    return {"notes": ctx.config.notes}
