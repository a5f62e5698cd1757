"""Rendering of registry state for failure messages.

Each registered call is listed with its identifier, arguments and number of
invocations. Unless suppressed, every invocation is followed by the stack
trace captured when it was registered, labeled with its position among all
invocations on the mock:

    * Call: PaymentGateway.charge, Args: ['alice', 10], Times invoked: 2, Stack traces:
    |__[ Stack trace for call[0] (1st invocation on this mock): ]
    |    -> File "test_shop.py", line 12, in charge
    |__[ Stack trace for call[1] (3rd invocation on this mock): ]
         -> File "test_shop.py", line 12, in charge
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from callbook.call import Call, Occurrence


def ordinal(cardinal: int) -> str:
    """Informal English ordinal for ``cardinal``: 1st, 2nd, 3rd, 4th, 11th, 21st."""
    if cardinal % 10 == 1 and cardinal != 11:
        return f"{cardinal}st"
    if cardinal % 10 == 2 and cardinal != 12:
        return f"{cardinal}nd"
    if cardinal % 10 == 3 and cardinal != 13:
        return f"{cardinal}rd"
    return f"{cardinal}th"


def describe_identifier(identifier: Any) -> str:
    if isinstance(identifier, str):
        return identifier
    qualname = getattr(identifier, "__qualname__", None)
    if isinstance(qualname, str) and callable(identifier):
        return qualname
    return str(identifier)


def format_args(args: Sequence[Any]) -> str:
    return ", ".join(repr(arg) for arg in args)


def format_context(context: traceback.StackSummary | None) -> list[str]:
    """One line per frame, innermost (the registering frame) first."""
    if not context:
        return ["-> <no stack trace captured>"]
    return [
        f'-> File "{frame.filename}", line {frame.lineno}, in {frame.name}'
        for frame in reversed(context)
    ]


def _render_occurrences(occurrences: Sequence[Occurrence]) -> list[str]:
    lines: list[str] = []
    last = len(occurrences) - 1
    for i, occurrence in enumerate(occurrences):
        trace_prefix = " |" if i < last else "  "
        label = ordinal(occurrence.sequence_no + 1)
        lines.append(
            f" |__[ Stack trace for call[{i}] ({label} invocation on this mock): ]"
        )
        lines.extend(
            f"{trace_prefix}    {line}" for line in format_context(occurrence.context)
        )
    return lines


def render_call(
    call: Call[Any], occurrences: Sequence[Occurrence], include_context: bool = True
) -> str:
    head = (
        f" * Call: {describe_identifier(call.identifier)}, "
        f"Args: [{format_args(call.args)}], Times invoked: {len(occurrences)}"
    )
    if not include_context:
        return head + "."
    return "\n".join([head + ", Stack traces:", *_render_occurrences(occurrences)])


def render_calls(
    entries: Iterable[tuple[Call[Any], Sequence[Occurrence]]],
    include_context: bool = True,
    predicate: Callable[[Call[Any]], bool] | None = None,
) -> str:
    """Render every entry accepted by ``predicate`` (all entries by default)."""
    return "\n".join(
        render_call(call, occurrences, include_context)
        for call, occurrences in entries
        if predicate is None or predicate(call)
    )
