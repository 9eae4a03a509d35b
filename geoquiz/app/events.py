from __future__ import annotations

"""Tiny pub/sub event bus used by the quiz engine to notify its collaborators."""

import logging
from typing import Any, Callable, Dict, List

log = logging.getLogger(__name__)

QUESTION_READY = "question_ready"
ANSWER_RESOLVED = "answer_resolved"
SESSION_ENDED = "session_ended"

Handler = Callable[[Any], None]


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Handler]] = {}

    def subscribe(self, event: str, handler: Handler) -> None:
        self._subs.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._subs.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any) -> None:
        # A failing subscriber must not stop the others or the engine
        for h in list(self._subs.get(event, [])):
            try:
                h(payload)
            except Exception:
                log.exception("Handler %r failed for event %s", h, event)
