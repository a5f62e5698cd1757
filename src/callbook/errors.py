from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from callbook.call import Call


class CallbookError(Exception):
    """Base class for programmer errors raised by the call registries.

    Verification mismatches are never raised; they are returned as ``False``.
    """


class CallsConfigurationError(CallbookError, ValueError):
    pass


class AmbiguousCallError(CallbookError, ValueError):
    def __init__(self, query: Call[Any], candidates: list[Call[Any]]) -> None:
        self.query = query
        self.candidates = candidates
        listing = "\n".join(f"  - {c}" for c in candidates)
        super().__init__(
            f"The call {query} was ambiguously specified using matching arguments.\n"
            f"It matches {len(candidates)} registered calls:\n{listing}\n"
            f"Narrow the matchers so exactly one registered call is selected."
        )


class RegistryInvariantError(CallbookError, RuntimeError):
    def __init__(self, call: Call[Any], sequence_no: int) -> None:
        self.call = call
        self.sequence_no = sequence_no
        super().__init__(
            f"Multiple registered invocations of {call} found with the same "
            f"invocation sequence number ({sequence_no})."
        )
