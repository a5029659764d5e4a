from __future__ import annotations
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional, TypeVar

from intentui.config import Config, validate_config
from intentui.core.ledger import Ledger
from intentui.core.tracker import DensityTracker

T = TypeVar("T")


class _Entry:
    __slots__ = ("tracker", "lock", "last_used")

    def __init__(self, tracker: DensityTracker, now: float):
        self.tracker = tracker
        self.lock = threading.Lock()
        self.last_used = now


class SessionRegistry:
    def __init__(self, cfg: Config, ledger: Optional[Ledger] = None, clock: Callable[[], float] = time.monotonic):
        self.cfg = validate_config(cfg)
        self.ledger = ledger
        self._clock = clock
        self._sessions: Dict[str, _Entry] = {}
        self._guard = threading.Lock()

    def create(self) -> str:
        sid = uuid.uuid4().hex
        tracker = DensityTracker(self.cfg, ledger=self.ledger, session_id=sid)
        with self._guard:
            now = self._clock()
            self._expire_locked(now)
            while len(self._sessions) >= self.cfg.max_sessions:
                oldest = min(self._sessions, key=lambda k: self._sessions[k].last_used)
                self._drop_locked(oldest, "evicted")
            self._sessions[sid] = _Entry(tracker, now)
        return sid

    def get(self, session_id: str) -> DensityTracker:
        with self._guard:
            return self._touch_locked(session_id).tracker

    def run(self, session_id: str, fn: Callable[[DensityTracker], T]) -> T:
        with self._guard:
            entry = self._touch_locked(session_id)
        with entry.lock:
            return fn(entry.tracker)

    def end(self, session_id: str) -> None:
        with self._guard:
            del self._sessions[session_id]

    def expire_idle(self) -> int:
        with self._guard:
            return self._expire_locked(self._clock())

    def ids(self) -> List[str]:
        with self._guard:
            return list(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._guard:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)

    def _touch_locked(self, session_id: str) -> _Entry:
        now = self._clock()
        entry = self._sessions[session_id]
        if now - entry.last_used > self.cfg.session_idle_ttl_s:
            self._drop_locked(session_id, "expired")
            raise KeyError(session_id)
        entry.last_used = now
        return entry

    def _expire_locked(self, now: float) -> int:
        stale = [k for k, e in self._sessions.items() if now - e.last_used > self.cfg.session_idle_ttl_s]
        for k in stale:
            self._drop_locked(k, "expired")
        return len(stale)

    def _drop_locked(self, session_id: str, cause: str) -> None:
        del self._sessions[session_id]
        if self.ledger is not None:
            self.ledger.append({"kind": "session_end", "session": session_id, "cause": cause})
