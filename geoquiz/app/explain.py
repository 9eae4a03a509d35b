from __future__ import annotations

"""Explain mode: terse one-line JSON traces of engine milestones.

Off by default; `geoquiz play --explain` turns it on. Traces go to stdout
unless another sink is installed (tests capture them in a list).
"""

import json
from typing import Any, Callable, Dict, Optional

_ENABLED = False
_SINK: Callable[[str], None] = print


def enable(flag: bool = True, sink: Optional[Callable[[str], None]] = None) -> None:
    global _ENABLED, _SINK
    _ENABLED = bool(flag)
    _SINK = sink or print


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    try:
        line = json.dumps(payload or {}, separators=(",", ":"), default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        line = "{}"
    _SINK(f"[EXPLAIN] {event} :: {line}")
