"""Call registration and verification for hand-written test doubles."""

from callbook.assertions import (
    assert_called,
    assert_called_and_remove,
    assert_called_next,
    assert_no_more_invocations,
    assert_no_more_invocations_anywhere,
)
from callbook.call import Call, Occurrence, structurally_equal
from callbook.default import CallsRegistry, Invoked
from callbook.diagnostics import ordinal
from callbook.errors import (
    AmbiguousCallError,
    CallbookError,
    CallsConfigurationError,
    RegistryInvariantError,
)
from callbook.factory import (
    CallType,
    default_calls,
    default_calls_using_names,
    new_calls,
    strict_calls,
    strict_calls_using_names,
)
from callbook.matching import ANY, Literal, Matches, any_value, arg_that, instance_of
from callbook.mocks import Mock, MocksRegistry
from callbook.registry import CallRegistry
from callbook.strict import StrictCallsRegistry

__version__ = "0.1.0"

__all__ = [
    "ANY",
    "AmbiguousCallError",
    "Call",
    "CallRegistry",
    "CallType",
    "CallbookError",
    "CallsConfigurationError",
    "CallsRegistry",
    "Invoked",
    "Literal",
    "Matches",
    "Mock",
    "MocksRegistry",
    "Occurrence",
    "RegistryInvariantError",
    "StrictCallsRegistry",
    "any_value",
    "arg_that",
    "assert_called",
    "assert_called_and_remove",
    "assert_called_next",
    "assert_no_more_invocations",
    "assert_no_more_invocations_anywhere",
    "default_calls",
    "default_calls_using_names",
    "instance_of",
    "new_calls",
    "ordinal",
    "strict_calls",
    "strict_calls_using_names",
    "structurally_equal",
]
