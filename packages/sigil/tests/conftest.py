from __future__ import annotations

import socket
from pathlib import Path
from typing import Callable

import pytest
from hypothesis import settings

from sigil.config import SigilConfig
from sigil.tools import ToolContext

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile("sigil", deadline=None, max_examples=50)
settings.load_profile("sigil")

MINIMAL_CONTRACT = """\
id = "{id}"
version = "1.0.0"
name = "{name}"
description = "d"
"""


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "contracts").mkdir(parents=True)
    return root


@pytest.fixture
def write_contract(project_root: Path) -> Callable[..., Path]:
    def _write(contract_id: str, body: str | None = None, filename: str | None = None) -> Path:
        path = project_root / "contracts" / (filename or f"{contract_id}.contract.toml")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body if body is not None else MINIMAL_CONTRACT.format(id=contract_id, name=contract_id.upper()), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tool_ctx(project_root: Path) -> ToolContext:
    return ToolContext(config=SigilConfig(contracts_dir="contracts/", notes="Use snake_case."), root=project_root)
