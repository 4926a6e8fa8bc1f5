"""Per-session serialization of questionnaire turns.

Route handlers run in FastAPI's threadpool, so concurrent requests for the
same session are serialized with a threading.Lock keyed by session id.
The store's compare-and-swap write still guards against writers in other
processes.

Example:
    with turn_locks.hold(session_id):
        engine.process_message(session_id, text)
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class TurnLockRegistry:
    """Lock per session id, alive only while a turn holds or waits for it.

    Thread-safe for single-process usage. Not designed for
    multi-process deployment.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._guard = threading.Lock()

    def _checkout(self, session_id: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(session_id)
            if entry is None:
                entry = _Entry()
                self._entries[session_id] = entry
            entry.holders += 1
            return entry

    def _checkin(self, session_id: str, entry: _Entry) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                self._entries.pop(session_id, None)

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        """Hold the session's lock for the duration of the block.

        The entry is dropped when the last holder or waiter leaves.
        """
        entry = self._checkout(session_id)
        try:
            with entry.lock:
                yield
        finally:
            self._checkin(session_id, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


turn_locks = TurnLockRegistry()
