from typing import Any

from callbook.call import Call
from callbook.default import CallsRegistry, Invoked, expected_count
from callbook.diagnostics import describe_identifier, ordinal
from callbook.mocks import MocksRegistry
from callbook.registry import CallRegistry
from callbook.strict import StrictCallsRegistry


def _same_identifier(calls: CallRegistry[Any], identifier: Any) -> str:
    listing = calls.report(predicate=lambda call: call.identifier == identifier)
    return listing or " (none)"


def _count_mismatch(
    calls: CallRegistry[Any], times: int | Invoked, identifier: Any, args: tuple[Any, ...]
) -> AssertionError:
    return AssertionError(
        f"Expected {Call(identifier, args)} to be invoked {expected_count(times)} x.\n"
        f"Registered invocations for {describe_identifier(identifier)}:\n"
        f"{_same_identifier(calls, identifier)}"
    )


def assert_called(
    calls: CallsRegistry[Any], times: int | Invoked, identifier: Any, *args: Any
) -> None:
    if not calls.verify_call(times, identifier, *args):
        raise _count_mismatch(calls, times, identifier, args)


def assert_called_and_remove(
    calls: CallsRegistry[Any], times: int | Invoked, identifier: Any, *args: Any
) -> None:
    if not calls.verify_and_remove_call(times, identifier, *args):
        raise _count_mismatch(calls, times, identifier, args)


def assert_called_next(
    calls: StrictCallsRegistry[Any], identifier: Any, *args: Any
) -> None:
    """Assert that ``identifier(*args)`` is the next invocation in order."""
    position = ordinal(calls.cursor + 1)
    if not calls.verify_strictly_and_remove_call(identifier, *args):
        raise AssertionError(
            f"Expected {Call(identifier, args)} as the {position} invocation on this mock.\n"
            f"Registered invocations for {describe_identifier(identifier)}:\n"
            f"{_same_identifier(calls, identifier)}"
        )


def assert_no_more_invocations(calls: CallRegistry[Any]) -> None:
    if not calls.verify_no_more_invocations():
        raise AssertionError(f"Unverified invocations remain:\n{calls.report()}")


def assert_no_more_invocations_anywhere(mocks: MocksRegistry) -> None:
    if not mocks.verify_no_more_invocations_anywhere():
        raise AssertionError(f"Unverified invocations remain:\n{mocks.summary()}")
