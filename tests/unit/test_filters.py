"""Tests for in-run deduplication and prioritization."""

from sourcing.core.schemas import RawCandidate
from sourcing.pipeline.filters import (
    DeduplicationFilter,
    dedup_key,
    prioritize_candidates,
    run_filter_chain,
)


def _make_raw(**overrides: object) -> RawCandidate:
    defaults: dict[str, object] = {
        "name": "Jane Doe",
        "source": "linkedin",
    }
    defaults.update(overrides)
    return RawCandidate.model_validate(defaults)


class TestDedupKey:
    def test_linkedin_url_canonical(self) -> None:
        a = _make_raw(profile_url="https://uk.linkedin.com/in/Jane-Doe/?trk=x")
        b = _make_raw(profile_url="https://www.linkedin.com/in/jane-doe")
        assert dedup_key(a) == dedup_key(b)

    def test_other_url(self) -> None:
        c = _make_raw(profile_url="https://github.com/JaneDoe/")
        assert dedup_key(c) == "url:github.com/janedoe"

    def test_name_fallback(self) -> None:
        assert dedup_key(_make_raw(name="  Jane DOE ")) == "name:jane doe"

    def test_no_key(self) -> None:
        assert dedup_key(_make_raw(name="")) is None


class TestDeduplicationFilter:
    def test_removes_within_batch(self) -> None:
        f = DeduplicationFilter()
        result = f([_make_raw(), _make_raw(name="jane doe"), _make_raw(name="John")])
        assert [c.name for c in result] == ["Jane Doe", "John"]
        assert f.removed == 1

    def test_state_across_calls(self) -> None:
        f = DeduplicationFilter()
        f([_make_raw(profile_url="https://www.linkedin.com/in/jane")])
        result = f(
            [
                _make_raw(name="J. Doe", source="github", profile_url="https://linkedin.com/in/JANE"),
                _make_raw(name="Other", source="github"),
            ]
        )
        assert [c.name for c in result] == ["Other"]
        assert f.removed == 1

    def test_url_beats_name(self) -> None:
        f = DeduplicationFilter()
        result = f(
            [
                _make_raw(profile_url="https://github.com/a"),
                _make_raw(profile_url="https://github.com/b"),
            ]
        )
        assert len(result) == 2

    def test_keyless_candidates_pass(self) -> None:
        f = DeduplicationFilter()
        assert len(f([_make_raw(name=""), _make_raw(name="")])) == 2
        assert f.removed == 0


class TestPrioritize:
    def test_order(self) -> None:
        plain = _make_raw(name="Plain")
        hiring = _make_raw(name="Hiring", hiring=True)
        seeking = _make_raw(name="Seeking", resume_summary="Actively looking for a new role")
        open_ = _make_raw(name="Open", open_to_work=True)

        result = prioritize_candidates([hiring, plain, seeking, open_])
        assert [c.name for c in result] == ["Open", "Seeking", "Plain", "Hiring"]

    def test_stable(self) -> None:
        names = ["A", "B", "C"]
        result = prioritize_candidates([_make_raw(name=n) for n in names])
        assert [c.name for c in result] == names


class TestRunFilterChain:
    def test_applies_in_order(self) -> None:
        f = DeduplicationFilter()
        candidates = [_make_raw(name="Plain"), _make_raw(name="Open", open_to_work=True), _make_raw(name="plain")]
        result = run_filter_chain(candidates, [f, prioritize_candidates])
        assert [c.name for c in result] == ["Open", "Plain"]

    def test_no_filters(self) -> None:
        candidates = [_make_raw()]
        assert run_filter_chain(candidates, []) == candidates
