from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from callbook.default import CallsRegistry
from callbook.registry import CallRegistry
from callbook.strict import StrictCallsRegistry

T = TypeVar("T")


class CallType(str, Enum):
    DEFAULT = "default"
    STRICT = "strict"


def new_calls(
    call_type: CallType | str,
    identifier_type: type[T] | None = None,
    **options: Any,
) -> CallRegistry[T]:
    """Create a counting or an ordered registry.

    Args:
        call_type:       CallType.DEFAULT or CallType.STRICT ("default"/"strict").
        identifier_type: Type every identifier must have, or None for any.
        options:         Passed through to the registry (capture_context, ...).
    """
    call_type = CallType(call_type)
    if call_type is CallType.STRICT:
        return StrictCallsRegistry(identifier_type, **options)
    return CallsRegistry(identifier_type, **options)


def default_calls(**options: Any) -> CallsRegistry[Any]:
    return CallsRegistry(None, **options)


def strict_calls(**options: Any) -> StrictCallsRegistry[Any]:
    return StrictCallsRegistry(None, **options)


def default_calls_using_names(**options: Any) -> CallsRegistry[str]:
    """Counting registry keyed by function name; supports register_caller()."""
    return CallsRegistry(str, **options)


def strict_calls_using_names(**options: Any) -> StrictCallsRegistry[str]:
    """Ordered registry keyed by function name; supports register_caller()."""
    return StrictCallsRegistry(str, **options)
