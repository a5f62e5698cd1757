from __future__ import annotations

import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from callbook.diagnostics import describe_identifier, format_args
from callbook.errors import CallsConfigurationError

T = TypeVar("T")

_ARRAY_TYPES = (list, tuple)


def structurally_equal(a: Any, b: Any) -> bool:
    """Deep equality for array-shaped values, null-safe equality otherwise.

    Lists and tuples are both array-shaped, so ``[1, 2]`` equals ``(1, 2)``.
    """
    if isinstance(a, _ARRAY_TYPES) and isinstance(b, _ARRAY_TYPES):
        return len(a) == len(b) and all(
            structurally_equal(x, y) for x, y in zip(a, b)
        )
    if a is None or b is None:
        return a is b
    return bool(a == b)


def as_argument_tuple(args: Sequence[Any] | None) -> tuple[Any, ...]:
    if args is None:
        raise CallsConfigurationError(
            "When a call is invoked without arguments, pass an empty sequence "
            "(e.g. ()) instead of None."
        )
    if isinstance(args, (str, bytes)):
        raise CallsConfigurationError(
            f"Arguments must be a sequence of arguments, got a single {type(args).__name__} "
            f"{args!r}. Wrap it: ({args!r},)"
        )
    return tuple(args)


@dataclass(frozen=True, eq=False)
class Call(Generic[T]):
    """One potential invocation: an identifier plus its positional arguments.

    Two calls are the same registry key when the identifiers are equal and
    every argument is structurally equal. Hashing only looks at the
    identifier and the arity so unhashable arguments can be stored.
    """

    identifier: T
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", as_argument_tuple(self.args))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Call):
            return NotImplemented
        return (
            self.identifier == other.identifier
            and len(self.args) == len(other.args)
            and all(structurally_equal(a, b) for a, b in zip(self.args, other.args))
        )

    def __hash__(self) -> int:
        return hash((self.identifier, len(self.args)))

    def __str__(self) -> str:
        return f"{describe_identifier(self.identifier)}({format_args(self.args)})"


@dataclass(frozen=True)
class Occurrence:
    """One registration of a call.

    sequence_no is unique within a registry and shared across identifiers.
    """

    sequence_no: int
    context: traceback.StackSummary | None = None
