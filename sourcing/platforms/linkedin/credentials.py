"""Round-robin API token pool with lazy 24h exhaustion reset."""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from sourcing.core.errors import NoCredentialsAvailable

logger = logging.getLogger(__name__)


@dataclass
class CredentialState:
    token: str
    exhausted: bool = False
    exhausted_at: float | None = None


def _mask(token: str) -> str:
    return f"...{token[-4:]}" if len(token) > 4 else "****"


class CredentialPool:
    """Tokens for one provider, owned by one adapter instance.

    Thread-safe: selection and marking happen under a single lock. An
    exhausted token becomes selectable again once ``reset_after_s`` has
    elapsed; the check happens on the next ``acquire``.

    Usage::

        pool = CredentialPool(["tok-a", "tok-b"])
        token = pool.acquire()
        ...
        pool.mark_exhausted(token)   # on a quota error
        token = pool.acquire(exclude={token})
    """

    def __init__(
        self,
        tokens: Iterable[str],
        *,
        reset_after_s: float = 24 * 3600,
        clock: Callable[[], float] = time.time,
        source: str = "linkedin",
    ) -> None:
        unique = list(dict.fromkeys(t.strip() for t in tokens if t and t.strip()))
        self._states = [CredentialState(token=t) for t in unique]
        self._reset_after_s = reset_after_s
        self._clock = clock
        self._source = source
        self._next = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def _reset_expired(self, now: float) -> None:
        for state in self._states:
            if (
                state.exhausted
                and state.exhausted_at is not None
                and now - state.exhausted_at >= self._reset_after_s
            ):
                state.exhausted = False
                state.exhausted_at = None
                logger.info("Token %s reset after cooldown", _mask(state.token))

    def acquire(self, exclude: Iterable[str] = ()) -> str:
        """Return the next available token not in ``exclude``.

        Raises:
            NoCredentialsAvailable: every token is exhausted or excluded.
        """
        excluded = set(exclude)
        with self._lock:
            now = self._clock()
            self._reset_expired(now)
            count = len(self._states)
            for offset in range(count):
                idx = (self._next + offset) % count
                state = self._states[idx]
                if state.exhausted or state.token in excluded:
                    continue
                self._next = (idx + 1) % count
                return state.token

            pending = [
                self._reset_after_s - (now - s.exhausted_at)
                for s in self._states
                if s.exhausted and s.exhausted_at is not None
            ]
        retry_after = max(0.0, min(pending)) if pending else 0.0
        raise NoCredentialsAvailable(retry_after, source=self._source)

    def mark_exhausted(self, token: str) -> None:
        with self._lock:
            for state in self._states:
                if state.token == token and not state.exhausted:
                    state.exhausted = True
                    state.exhausted_at = self._clock()
                    logger.warning(
                        "Token %s hit its usage limit, rotating", _mask(token)
                    )

    def states(self) -> list[CredentialState]:
        """Snapshot of token states."""
        with self._lock:
            return [
                CredentialState(s.token, s.exhausted, s.exhausted_at) for s in self._states
            ]
