from __future__ import annotations

from pathlib import Path
from typing import Callable

from sigil.tools import TOOLS, ToolContext, call_tool

NEW_CONTRACT = {"id": "a", "version": "1.0.0", "name": "A", "description": "first"}


def test_tool_catalog_order() -> None:
    assert [spec.name for spec in TOOLS] == [
        "sigil_get_notes",
        "sigil_list_contracts",
        "sigil_get_contract",
        "sigil_get_affected_contracts",
        "sigil_validate_contract",
        "sigil_create_contract",
        "sigil_update_contract",
        "sigil_delete_contract",
        "sigil_validate_all_contracts",
        "sigil_review_changeset",
    ]
    assert all(spec.description for spec in TOOLS)


def test_create_list_affected_validate_flow(tool_ctx: ToolContext, project_root: Path) -> None:
    created = call_tool(tool_ctx, "sigil_create_contract", contract=NEW_CONTRACT)
    assert created == {"path": "contracts/a.contract.toml", "warnings": []}
    assert (project_root / "contracts/a.contract.toml").is_file()

    listed = call_tool(tool_ctx, "sigil_list_contracts")
    assert listed["total"] == 1
    assert listed["contracts"][0]["id"] == "a"
    assert listed["contracts"][0]["file_count"] == 0
    assert listed["contracts"][0]["trigger_type"] is None

    affected = call_tool(tool_ctx, "sigil_get_affected_contracts", files=["x.txt"])
    assert affected == {"contracts": [], "total": 0, "warnings": []}

    assert call_tool(tool_ctx, "sigil_validate_all_contracts") == {"pass": True, "errors": [], "warnings": []}


def test_get_contract_requires_discovery(tool_ctx: ToolContext, write_contract: Callable[..., Path]) -> None:
    write_contract("a")
    payload = call_tool(tool_ctx, "sigil_get_contract", contract_id="a")
    assert payload["error"].startswith("You must call sigil_list_contracts")
    call_tool(tool_ctx, "sigil_list_contracts")
    payload = call_tool(tool_ctx, "sigil_get_contract", contract_id="a")
    assert payload["contract"]["id"] == "a"
    assert payload["warnings"] == []


def test_update_and_delete_require_detail_read(tool_ctx: ToolContext, write_contract: Callable[..., Path]) -> None:
    write_contract("a")
    call_tool(tool_ctx, "sigil_list_contracts")
    denied = call_tool(tool_ctx, "sigil_update_contract", contract_id="a", updates={"name": "B"})
    assert denied == {"error": "You must call sigil_get_contract for 'a' before calling sigil_update_contract."}
    denied = call_tool(tool_ctx, "sigil_delete_contract", contract_id="a")
    assert "before calling sigil_delete_contract" in denied["error"]

    call_tool(tool_ctx, "sigil_get_contract", contract_id="a")
    updated = call_tool(tool_ctx, "sigil_update_contract", contract_id="a", updates={"name": "B"})
    assert '+name = "B"\n' in updated["diff"]
    assert call_tool(tool_ctx, "sigil_delete_contract", contract_id="a") == {"deleted": "contracts/a.contract.toml"}


def test_get_contract_unknown_id(tool_ctx: ToolContext) -> None:
    call_tool(tool_ctx, "sigil_list_contracts")
    assert call_tool(tool_ctx, "sigil_get_contract", contract_id="ghost") == {"error": "Contract 'ghost' not found"}


def test_get_contract_file_contents(
    tool_ctx: ToolContext, project_root: Path, write_contract: Callable[..., Path]
) -> None:
    (project_root / "src").mkdir()
    (project_root / "src/lib.rs").write_text("fn main() {}\n", encoding="utf-8")
    write_contract(
        "a",
        body='id = "a"\nversion = "1"\nname = "A"\ndescription = "d"\nfiles = ["src/lib.rs", "src/gone.rs"]\n',
    )
    call_tool(tool_ctx, "sigil_list_contracts")
    payload = call_tool(tool_ctx, "sigil_get_contract", contract_id="a", retrieve_file_contents=True)
    assert payload["file_contents"] == {
        "src/lib.rs": {"status": "ok", "contents": "fn main() {}\n"},
        "src/gone.rs": {"status": "missing"},
    }
    assert payload["warnings"] == ["Missing file: 'src/gone.rs'"]


def test_list_filters(tool_ctx: ToolContext, write_contract: Callable[..., Path]) -> None:
    write_contract("a", body='id = "a"\nversion = "1"\nname = "A"\ndescription = "d"\ndomain = "api"\ntags = ["x"]\n')
    write_contract("b", body='id = "b"\nversion = "1"\nname = "B"\ndescription = "d"\ndomain = "Api"\ntags = ["y", "z"]\n')
    write_contract("c", body='id = "c"\nversion = "1"\nname = "C"\ndescription = "d"\n')

    def ids(**params: object) -> list[str]:
        return [row["id"] for row in call_tool(tool_ctx, "sigil_list_contracts", **params)["contracts"]]

    assert ids() == ["a", "b", "c"]
    assert ids(domain="api") == ["a"]
    assert ids(tags=["x", "z"]) == ["a", "b"]
    assert ids(domain="api", tags=["z"]) == []


def test_list_reports_missing_files_and_bad_contracts(tool_ctx: ToolContext, write_contract: Callable[..., Path]) -> None:
    write_contract("a", body='id = "a"\nversion = "1"\nname = "A"\ndescription = "d"\nfiles = ["nope.txt"]\n')
    write_contract("broken", body="id = \n")
    payload = call_tool(tool_ctx, "sigil_list_contracts")
    assert payload["total"] == 1
    assert payload["warnings"][0].startswith("Failed to parse ")
    assert payload["warnings"][1] == "Contract 'a': missing file 'nope.txt'"


def test_affected_payload_shape(tool_ctx: ToolContext, write_contract: Callable[..., Path]) -> None:
    write_contract(
        "a",
        body='id = "a"\nversion = "1"\nname = "A"\ndescription = "d"\nfiles = ["src/a.rs"]\napplies_to = "src/**"\n',
    )
    payload = call_tool(tool_ctx, "sigil_get_affected_contracts", files=["src/a.rs", "src/b.rs"])
    assert payload["total"] == 1
    assert payload["contracts"][0]["matched_files"] == {
        "direct": ["src/a.rs"],
        "applies_to": [{"pattern": "src/**", "matched_files": ["src/a.rs", "src/b.rs"]}],
    }


def test_review_marks_affected_contracts_read(
    tool_ctx: ToolContext, project_root: Path, write_contract: Callable[..., Path]
) -> None:
    (project_root / "api.py").write_text("x = 1\n", encoding="utf-8")
    write_contract("a", body='id = "a"\nversion = "1"\nname = "A"\ndescription = "d"\nfiles = ["api.py"]\n')
    payload = call_tool(tool_ctx, "sigil_review_changeset", files=["api.py"], diff="+x = 1")
    assert payload["total"] == 1
    assert payload["diff"] == "+x = 1"
    entry = payload["affected_contracts"][0]
    assert entry["matched_files"] == ["api.py"]
    assert entry["contract"]["id"] == "a"
    assert entry["file_contents"] == {"api.py": {"status": "ok", "contents": "x = 1\n"}}
    assert "file_count" not in entry

    updated = call_tool(tool_ctx, "sigil_update_contract", contract_id="a", updates={"version": "2"})
    assert "error" not in updated


def test_validate_one_reports_issues(tool_ctx: ToolContext, write_contract: Callable[..., Path]) -> None:
    write_contract("a", body='id = "a"\nversion = "1"\nname = "A"\ndescription = "d"\nfiles = ["nope.txt"]\n')
    payload = call_tool(tool_ctx, "sigil_validate_contract", contract_id="a")
    assert payload["pass"] is False
    assert [issue["kind"] for issue in payload["errors"]] == ["missing_file"]
    assert call_tool(tool_ctx, "sigil_validate_contract", contract_id="zz") == {"error": "Contract 'zz' not found"}


def test_schema_failure_payload_lists_violations(tool_ctx: ToolContext) -> None:
    payload = call_tool(tool_ctx, "sigil_create_contract", contract={"id": "a"})
    assert payload["error"] == "Schema validation failed"
    assert len(payload["validation"]) == 3


def test_notes_and_unknown_tool(tool_ctx: ToolContext) -> None:
    assert call_tool(tool_ctx, "sigil_get_notes") == {"notes": "Use snake_case."}
    assert call_tool(tool_ctx, "sigil_nope") == {"error": "unknown tool sigil_nope"}


def test_affected_with_no_matches_still_counts_as_discovery(
    tool_ctx: ToolContext, write_contract: Callable[..., Path]
) -> None:
    write_contract("a")
    assert call_tool(tool_ctx, "sigil_get_affected_contracts", files=["zzz"])["total"] == 0
    payload = call_tool(tool_ctx, "sigil_get_contract", contract_id="a")
    assert "error" not in payload
    assert payload["contract"]["id"] == "a"
