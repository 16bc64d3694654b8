"""
Process-wide live-session counter.

A cheap count of live sessions that avoids a store round-trip on every
read.  It is a cache, not a ledger: the store stays the source of truth
and a crash between a store write and a counter update leaves them out
of step until `SessionLifecycleManager.resync_counter` runs.
"""

import threading


class SessionCounter:
    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        """Callers must only decrement after a confirmed deletion."""
        with self._lock:
            self._value -= 1
            return self._value

    def reset(self) -> None:
        self.set(0)

    def set(self, value: int) -> None:
        with self._lock:
            self._value = value

    def get(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"<SessionCounter {self._value}>"


session_counter = SessionCounter()
