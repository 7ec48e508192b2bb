from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .. import __version__
from ..config import CONFIG_FILE, load_config
from ..errors import SigilError
from ..exit_codes import ERR_USAGE, ERR_VALIDATION, OK
from ..logging import log_event, make_session_id, set_session_id
from ..tools import ToolContext, call_tool


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sigil", description="contract store and agent tool server")
    p.add_argument("--version", action="version", version=f"sigil {__version__}")
    p.add_argument("--config", default=CONFIG_FILE, help=f"config file path (default: {CONFIG_FILE})")
    p.add_argument("--root", default=None, help="project root for contracts_dir and referenced files (default: cwd)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("serve", help="run the MCP server over stdio")

    val_p = sub.add_parser("validate", help="validate every contract")
    val_p.add_argument("--json", action="store_true", help="emit JSON output")

    list_p = sub.add_parser("list", help="list contract summaries")
    list_p.add_argument("--domain", help="exact domain filter")
    list_p.add_argument("--tag", action="append", dest="tags", help="tag filter, repeatable (any tag matches)")
    list_p.add_argument("--json", action="store_true", help="emit JSON output")

    sub.add_parser("version", help="print version")
    return p


def _emit_validation(payload: dict[str, object], as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, sort_keys=True))
        return
    status = "pass" if payload["pass"] else "fail"
    print(f"status={status}")
    for level in ("errors", "warnings"):
        for issue in payload[level]:  # type: ignore[union-attr]
            owner = issue.get("contract_id") or "-"
            print(f"{level[:-1]} [{issue['kind']}] {owner}: {issue['message']}")


def _emit_list(payload: dict[str, object], as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, sort_keys=True))
        return
    for row in payload["contracts"]:  # type: ignore[union-attr]
        print(f"{row['id']}\t{row['version']}\t{row['priority']}\t{row['status']}\t{row['name']}")
    for warning in payload["warnings"]:  # type: ignore[union-attr]
        print(f"warning: {warning}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    ns = build_parser().parse_args(argv)
    if ns.cmd == "version":
        print(f"sigil {__version__}")
        return OK
    if ns.root and not Path(ns.root).is_dir():
        print(f"--root is not a directory: {ns.root}", file=sys.stderr)
        return ERR_USAGE
    set_session_id(make_session_id())
    try:
        config = load_config(ns.config)
    except SigilError as exc:
        print(str(exc), file=sys.stderr)
        return exc.code
    ctx = ToolContext(config=config, root=Path(ns.root).resolve() if ns.root else Path.cwd())
    log_event("debug", "cli", "start", cmd=ns.cmd)

    if ns.cmd == "serve":
        from ..server import serve

        serve(ctx)
        return OK
    if ns.cmd == "validate":
        payload = call_tool(ctx, "sigil_validate_all_contracts")
        _emit_validation(payload, ns.json)
        return OK if payload["pass"] else ERR_VALIDATION
    if ns.cmd == "list":
        payload = call_tool(ctx, "sigil_list_contracts", domain=ns.domain, tags=ns.tags)
        _emit_list(payload, ns.json)
        return OK
    raise AssertionError(f"unhandled command {ns.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
