from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from typing import TextIO

_LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}

_session_id = "sigil"


def set_session_id(session_id: str) -> None:
    global _session_id
    _session_id = session_id


def make_session_id(prefix: str = "sigil") -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return f"{prefix}-{ts}-{os.getpid()}"


def _threshold() -> int:
    return _LEVELS.get(os.environ.get("SIGIL_LOG_LEVEL", "info").strip().lower(), _LEVELS["info"])


def log_event(level: str, component: str, action: str, stream: TextIO | None = None, **fields: object) -> None:
    if _LEVELS.get(level, _LEVELS["info"]) < _threshold():
        return
    out = stream or sys.stderr
    payload: dict[str, object] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "session": _session_id,
        "component": component,
        "action": action,
    }
    payload.update(fields)
    if os.environ.get("SIGIL_LOG_FORMAT", "json").strip().lower() != "text":
        out.write(json.dumps(payload, sort_keys=True, default=str) + "\n")
        return
    core = f"ts={payload['ts']} level={level} session={_session_id} component={component} action={action}"
    extras = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    out.write((core if not extras else f"{core} {extras}") + "\n")
