"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules (e.g. auth) can use
the same instance without circular imports. Central limit strings and decorators
keep rate limits DRY.
"""

import time
from threading import Lock

from fastapi import HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Single source of truth for rate limit strings and decorators.
AUTH_LIMIT = "10/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"
AUTH_PER_IDENTIFIER_LIMIT = 20  # attempts per minute per login identifier or email
AUTH_PER_IDENTIFIER_WINDOW_SEC = 60

limit_auth = limiter.limit(AUTH_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)

# In-memory sliding window for per-identifier auth rate limit (login, forgot/reset password).
# Keys whose window is empty are dropped; a sweep once per window removes idle ones.
_auth_per_identifier: dict[str, list[float]] = {}
_auth_per_identifier_lock = Lock()
_last_sweep = 0.0


def _sweep_idle_identifiers(cutoff: float) -> None:
    idle = [key for key, hits in _auth_per_identifier.items() if hits[-1] <= cutoff]
    for key in idle:
        del _auth_per_identifier[key]


def check_auth_rate_per_identifier(identifier: str) -> None:
    """Raise 429 if too many auth attempts for this identifier in the last minute."""
    global _last_sweep
    if not identifier or not limiter.enabled:
        return
    now = time.monotonic()
    cutoff = now - AUTH_PER_IDENTIFIER_WINDOW_SEC
    key = identifier.strip().lower()
    with _auth_per_identifier_lock:
        if now - _last_sweep >= AUTH_PER_IDENTIFIER_WINDOW_SEC:
            _sweep_idle_identifiers(cutoff)
            _last_sweep = now
        hits = [t for t in _auth_per_identifier.get(key, ()) if t > cutoff]
        if len(hits) >= AUTH_PER_IDENTIFIER_LIMIT:
            _auth_per_identifier[key] = hits
            raise HTTPException(
                status_code=429,
                detail="Too many attempts for this account; try again later",
            )
        hits.append(now)
        _auth_per_identifier[key] = hits


def tracked_identifier_count() -> int:
    """Number of identifiers with attempts inside the current window."""
    with _auth_per_identifier_lock:
        return len(_auth_per_identifier)


def reset_auth_rate_counters() -> None:
    """Clear the per-identifier windows (tests)."""
    global _last_sweep
    with _auth_per_identifier_lock:
        _auth_per_identifier.clear()
        _last_sweep = 0.0
