import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from callbook import (
    Mock,
    MocksRegistry,
    assert_called,
    assert_called_and_remove,
    assert_called_next,
    assert_no_more_invocations,
    assert_no_more_invocations_anywhere,
    default_calls,
    strict_calls,
)


class FakeClock:
    """Mock delegating its verification to a private registry."""

    def __init__(self) -> None:
        self._calls = default_calls(capture_context=False)

    def now(self) -> int:
        self._calls.register_call("now", ())
        return 0

    def verify_now(self, times: int) -> bool:
        return self._calls.verify_and_remove_call(times, "now")

    def verify_no_more_invocations(self, include_context: bool | None = None) -> bool:
        return self._calls.verify_no_more_invocations(include_context)


def test_registries_and_delegating_mocks_are_mocks() -> None:
    assert isinstance(default_calls(), Mock)
    assert isinstance(FakeClock(), Mock)


def test_sweep_succeeds_when_everything_is_verified() -> None:
    mocks = MocksRegistry()
    calls = default_calls()
    clock = FakeClock()
    mocks.register_mock(calls)
    mocks.register_mock(clock)

    calls.register_call("charge", ("alice", 10))
    clock.now()
    assert not mocks.verify_no_more_invocations_anywhere()

    assert calls.verify_and_remove_call(1, "charge", "alice", 10)
    assert not mocks.verify_no_more_invocations_anywhere()
    assert clock.verify_now(1)
    assert mocks.verify_no_more_invocations_anywhere()


def test_sweep_asks_every_mock(caplog: pytest.LogCaptureFixture) -> None:
    mocks = MocksRegistry(include_context=False)
    first, second = default_calls(), strict_calls()
    first.register_call("a", ())
    second.register_call("b", ())
    mocks.register_mock(first)
    mocks.register_mock(second)

    assert not mocks.verify_no_more_invocations_anywhere()
    assert " * Call: a, Args: [], Times invoked: 1." in caplog.text
    assert " * Call: b, Args: [], Times invoked: 1." in caplog.text
    assert "2 of 2 mocks have unverified invocations." in caplog.text


def test_providers_are_resolved_lazily() -> None:
    mocks = MocksRegistry()
    created = []

    def provide() -> FakeClock:
        clock = FakeClock()
        clock.now()
        created.append(clock)
        return clock

    assert mocks.register_provider(provide)
    assert not mocks.register_provider(provide)
    assert created == []
    assert len(mocks) == 1

    assert not mocks.verify_no_more_invocations_anywhere()
    assert len(created) == 1
    assert created[0].verify_now(1)
    assert mocks.verify_no_more_invocations_anywhere()
    assert len(created) == 1


def test_registering_twice_is_ignored() -> None:
    mocks = MocksRegistry()
    calls = default_calls()
    assert mocks.register_mock(calls)
    assert not mocks.register_mock(calls)
    assert len(mocks) == 1


def test_reset_all_and_summary() -> None:
    mocks = MocksRegistry(include_context=False)
    calls = default_calls()
    mocks.register_mock(calls)
    calls.register_call("a", (1,))
    assert " * Call: a, Args: [1], Times invoked: 1." in mocks.summary()

    mocks.reset_all()
    assert mocks.summary() == "No unverified invocations."
    assert mocks.verify_no_more_invocations_anywhere()


def test_assertion_helpers_pass() -> None:
    calls = default_calls()
    calls.register_call("a", (1,))
    assert_called(calls, 1, "a", 1)
    assert_called_and_remove(calls, 1, "a", 1)
    assert_no_more_invocations(calls)

    ordered = strict_calls()
    ordered.register_call("a", ())
    assert_called_next(ordered, "a")
    mocks = MocksRegistry()
    mocks.register_mock(calls)
    mocks.register_mock(ordered)
    assert_no_more_invocations_anywhere(mocks)


def test_assertion_helpers_explain_failures() -> None:
    calls = default_calls(include_context=False)
    calls.register_call("a", (1,))

    with pytest.raises(AssertionError) as excinfo:
        assert_called(calls, 2, "a", 1)
    assert "Expected a(1) to be invoked 2 x." in str(excinfo.value)
    assert " * Call: a, Args: [1], Times invoked: 1." in str(excinfo.value)

    with pytest.raises(AssertionError, match="Unverified invocations remain"):
        assert_no_more_invocations(calls)

    ordered = strict_calls(include_context=False)
    ordered.register_call("a", ())
    ordered.register_call("b", ())
    with pytest.raises(AssertionError, match=r"Expected b\(\) as the 1st invocation on this mock"):
        assert_called_next(ordered, "b")


def test_assertion_helpers_work_with_optimizations(tmp_path: Path) -> None:
    """Helpers verify and remove calls even when assert statements are stripped."""
    script = tmp_path / "optimized.py"
    script.write_text(
        textwrap.dedent(
            """
            from callbook import (
                assert_called_and_remove, assert_called_next, default_calls, strict_calls,
            )

            calls = default_calls(capture_context=False)
            calls.register_call("a", (1,))
            assert_called_and_remove(calls, 1, "a", 1)
            print("default_left", len(calls))

            ordered = strict_calls(capture_context=False)
            ordered.register_call("a", ())
            assert_called_next(ordered, "a")
            print("strict_cursor", ordered.cursor, "left", len(ordered))

            try:
                assert_called_and_remove(calls, 5, "zzz")
            except AssertionError:
                print("wrong_count_failed")
            """
        )
    )
    result = subprocess.run(
        [sys.executable, "-O", str(script)], capture_output=True, text=True, check=True
    )
    assert result.stdout.split("\n")[:3] == [
        "default_left 0",
        "strict_cursor 1 left 0",
        "wrong_count_failed",
    ]
