"""Per-connection call-ordering gate.

Discovery (list / affected) must precede detail reads, and a detail read of a
contract must precede its update or delete. State only grows for the lifetime
of the connection. This nudges automated callers; it is not access control.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .errors import WorkflowError

DISCOVERY_TOOLS = ("sigil_list_contracts", "sigil_get_affected_contracts")
DETAIL_TOOL = "sigil_get_contract"


@dataclass
class SessionGate:
    _listed: bool = False
    _read_ids: set[str] = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def listed(self) -> bool:
        with self._lock:
            return self._listed

    def read_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._read_ids)

    def mark_listed(self) -> None:
        with self._lock:
            self._listed = True

    def require_listed(self, tool: str, contract_id: str) -> None:
        with self._lock:
            if self._listed:
                return
        raise WorkflowError(
            f"You must call {DISCOVERY_TOOLS[0]} or {DISCOVERY_TOOLS[1]} before calling {tool} for '{contract_id}'."
        )

    def mark_read(self, contract_id: str) -> None:
        with self._lock:
            self._read_ids.add(contract_id)

    def require_read(self, tool: str, contract_id: str) -> None:
        with self._lock:
            if contract_id in self._read_ids:
                return
        raise WorkflowError(f"You must call {DETAIL_TOOL} for '{contract_id}' before calling {tool}.")
