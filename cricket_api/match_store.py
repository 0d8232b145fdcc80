# cricket_api/match_store.py
from __future__ import annotations

import threading
import time
import uuid
from typing import Any, Callable, Dict, Tuple

from cricket_api.config import MATCH_TTL_SECONDS
from cricket_api.engine import initial_state
from cricket_api.models import MatchState

# Simple in-memory store of live matches (sufficient for single-instance deploys)
# match_id -> (expires_at_epoch, state)
_matches: Dict[str, Tuple[float, MatchState]] = {}

# Serialises read-modify-write of a match; sync endpoints run in a thread pool
_lock = threading.Lock()


class MatchNotFound(KeyError):
    """Raised for an unknown or expired match id."""
    pass


def _expires_at(ttl_seconds: int) -> float:
    return time.time() + ttl_seconds


def _purge_expired(now: float) -> None:
    for k in [k for k, (exp, _) in _matches.items() if now > exp]:
        _matches.pop(k, None)


def create(ttl_seconds: int = MATCH_TTL_SECONDS) -> Tuple[str, MatchState]:
    match_id = uuid.uuid4().hex
    state = initial_state()
    with _lock:
        _purge_expired(time.time())
        _matches[match_id] = (_expires_at(ttl_seconds), state)
    return match_id, state


def get(match_id: str) -> MatchState:
    with _lock:
        item = _matches.get(match_id)
        if not item:
            raise MatchNotFound(match_id)

        expires_at, state = item
        if time.time() > expires_at:
            _matches.pop(match_id, None)
            raise MatchNotFound(match_id)

        return state


def apply(
    match_id: str,
    command: Callable[..., MatchState],
    *args: Any,
    ttl_seconds: int = MATCH_TTL_SECONDS,
    **kwargs: Any,
) -> MatchState:
    """
    Run one engine command against the stored state and keep the result.

    If the command raises, the stored state is left as it was.
    """
    with _lock:
        item = _matches.get(match_id)
        if not item or time.time() > item[0]:
            _matches.pop(match_id, None)
            raise MatchNotFound(match_id)

        new_state = command(item[1], *args, **kwargs)
        _matches[match_id] = (_expires_at(ttl_seconds), new_state)
        return new_state


def delete(match_id: str) -> bool:
    with _lock:
        return _matches.pop(match_id, None) is not None


def clear() -> None:
    with _lock:
        _matches.clear()


def debug_snapshot() -> Dict[str, float]:
    """
    Returns current match ids with remaining TTL (seconds).
    Useful for debugging.
    """
    now = time.time()
    with _lock:
        return {k: max(0.0, exp - now) for k, (exp, _) in _matches.items()}
