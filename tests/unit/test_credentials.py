"""Tests for the round-robin credential pool."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from sourcing.core.errors import NoCredentialsAvailable
from sourcing.platforms.linkedin.credentials import CredentialPool

DAY = 24 * 3600


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


class TestAcquire:
    def test_round_robin(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a", "b", "c"], clock=clock)
        assert [pool.acquire() for _ in range(4)] == ["a", "b", "c", "a"]

    def test_blank_and_duplicate_tokens_dropped(self) -> None:
        pool = CredentialPool(["a", " ", "", "a", " b "])
        assert len(pool) == 2
        assert {s.token for s in pool.states()} == {"a", "b"}

    def test_exclude(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a", "b"], clock=clock)
        assert pool.acquire(exclude={"a"}) == "b"
        assert pool.acquire(exclude={"b"}) == "a"

    def test_exclude_all_raises(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a", "b"], clock=clock)
        with pytest.raises(NoCredentialsAvailable) as exc_info:
            pool.acquire(exclude={"a", "b"})
        assert exc_info.value.retry_after == 0.0

    def test_empty_pool_raises(self) -> None:
        with pytest.raises(NoCredentialsAvailable):
            CredentialPool([]).acquire()


class TestExhaustion:
    def test_exhausted_token_skipped(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a", "b"], clock=clock)
        pool.mark_exhausted("a")
        assert [pool.acquire() for _ in range(3)] == ["b", "b", "b"]

    def test_all_exhausted_reports_next_reset(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a", "b"], clock=clock)
        pool.mark_exhausted("a")
        clock.advance(2 * 3600)
        pool.mark_exhausted("b")
        clock.advance(3600)

        with pytest.raises(NoCredentialsAvailable, match="Next reset in 21.0 hours") as exc_info:
            pool.acquire()
        assert exc_info.value.retry_after == pytest.approx(21 * 3600)
        assert exc_info.value.source == "linkedin"

    def test_reset_after_24h(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a"], clock=clock)
        pool.mark_exhausted("a")
        clock.advance(DAY - 1)
        with pytest.raises(NoCredentialsAvailable):
            pool.acquire()

        clock.advance(1)
        assert pool.acquire() == "a"
        assert pool.states()[0].exhausted is False

    def test_mark_is_idempotent(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a", "b"], clock=clock)
        pool.mark_exhausted("a")
        first = pool.states()[0].exhausted_at
        clock.advance(100)
        pool.mark_exhausted("a")
        assert pool.states()[0].exhausted_at == first

    def test_unknown_token_ignored(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a"], clock=clock)
        pool.mark_exhausted("zzz")
        assert pool.acquire() == "a"

    def test_states_are_snapshots(self, clock: FakeClock) -> None:
        pool = CredentialPool(["a"], clock=clock)
        snapshot = pool.states()
        pool.mark_exhausted("a")
        assert snapshot[0].exhausted is False


class TestConcurrency:
    def test_concurrent_acquire_and_mark(self, clock: FakeClock) -> None:
        tokens = [f"tok-{i}" for i in range(10)]
        pool = CredentialPool(tokens, clock=clock)

        def worker(_: int) -> str:
            token = pool.acquire()
            pool.mark_exhausted(token)
            return token

        with ThreadPoolExecutor(max_workers=8) as executor:
            used = list(executor.map(worker, range(10)))

        assert sorted(used) == sorted(tokens)
        assert all(s.exhausted for s in pool.states())
