from __future__ import annotations

import threading

import pytest

from sigil.errors import WorkflowError
from sigil.exit_codes import ERR_WORKFLOW
from sigil.session import SessionGate


def test_detail_read_requires_discovery_first() -> None:
    gate = SessionGate()
    with pytest.raises(WorkflowError) as excinfo:
        gate.require_listed("sigil_get_contract", "a")
    assert str(excinfo.value) == (
        "You must call sigil_list_contracts or sigil_get_affected_contracts before calling sigil_get_contract for 'a'."
    )
    assert excinfo.value.code == ERR_WORKFLOW
    gate.mark_listed()
    gate.require_listed("sigil_get_contract", "a")
    assert gate.listed


def test_mutation_requires_detail_read_of_that_id() -> None:
    gate = SessionGate()
    gate.mark_listed()
    gate.mark_read("a")
    gate.require_read("sigil_update_contract", "a")
    with pytest.raises(WorkflowError) as excinfo:
        gate.require_read("sigil_delete_contract", "b")
    assert str(excinfo.value) == "You must call sigil_get_contract for 'b' before calling sigil_delete_contract."


def test_gates_are_independent_per_instance() -> None:
    first, second = SessionGate(), SessionGate()
    first.mark_listed()
    first.mark_read("a")
    assert not second.listed
    assert second.read_ids() == frozenset()


def test_concurrent_marks_are_all_recorded() -> None:
    gate = SessionGate()
    ids = [f"c{i}" for i in range(200)]

    def worker(chunk: list[str]) -> None:
        for contract_id in chunk:
            gate.mark_read(contract_id)

    threads = [threading.Thread(target=worker, args=(ids[i::4],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert gate.read_ids() == frozenset(ids)
