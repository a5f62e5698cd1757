from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from callbook.call import Call
from callbook.diagnostics import describe_identifier, format_args
from callbook.errors import CallsConfigurationError
from callbook.registry import CallRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Invoked:
    """Expected number of invocations, for fluent verification.

        calls.verify_call(Invoked.TWICE, "charge", "alice", 10)
    """

    count: int

    NEVER: ClassVar[Invoked]
    ONCE: ClassVar[Invoked]
    TWICE: ClassVar[Invoked]
    THRICE: ClassVar[Invoked]

    @classmethod
    def times(cls, count: int) -> Invoked:
        return cls(count)


Invoked.NEVER = Invoked(0)
Invoked.ONCE = Invoked(1)
Invoked.TWICE = Invoked(2)
Invoked.THRICE = Invoked(3)


def expected_count(times: int | Invoked) -> int:
    count = times.count if isinstance(times, Invoked) else times
    if count < 0:
        raise CallsConfigurationError(f"Expected invocation count must be >= 0, got {count}.")
    return count


class CallsRegistry(CallRegistry[T]):
    """Counting verification: "this call happened exactly N times".

    No order is enforced, neither between calls nor between invocations of
    the same call.
    """

    def verify_call(self, times: int | Invoked, identifier: T, *args: Any) -> bool:
        return self._is_called(times, Call(identifier, args), remove=False)

    def verify(self, times: int | Invoked, call: Call[T]) -> bool:
        return self._is_called(times, call, remove=False)

    def verify_and_remove_call(
        self, times: int | Invoked, identifier: T, *args: Any
    ) -> bool:
        """Like verify_call, and on success forget every invocation of the call.

        Once all calls are verified this way, verify_no_more_invocations()
        succeeds.
        """
        return self._is_called(times, Call(identifier, args), remove=True)

    def verify_and_remove(self, times: int | Invoked, call: Call[T]) -> bool:
        return self._is_called(times, call, remove=True)

    def _is_called(self, times: int | Invoked, query: Call[T], remove: bool) -> bool:
        expected = expected_count(times)
        found = self._resolve(query)
        actual = len(self._calls[found]) if found is not None else 0
        if actual != expected:
            call = found if found is not None else query
            logger.error(
                "%s was invoked %s %d x, while %d x was expected.",
                describe_identifier(call.identifier),
                f"with arguments [{format_args(call.args)}]:"
                if call.args
                else "without arguments:",
                actual,
                expected,
            )
            self._log_same_identifier(call.identifier)
            return False
        if remove and found is not None:
            del self._calls[found]
            logger.debug("Verified and removed %s (%d x)", found, actual)
        return True
