"""Argument matching for verification queries.

A query argument is either a literal, compared structurally with the stored
argument, or a matcher that tests the stored argument:

    calls.verify_call(1, "charge", "alice", instance_of(int))
    calls.verify_call(1, "charge", arg_that(lambda who: who.startswith("al")), ANY)

Objects exposing a ``matches(item)`` method (PyHamcrest matchers, for one)
are matchers too. Plain callables are literals: wrap them in ``Matches`` or
``arg_that`` to use them as predicates. Stored arguments are always literal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from callbook.call import Call, structurally_equal
from callbook.errors import AmbiguousCallError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Matches:
    """Query argument that accepts any stored argument satisfying ``predicate``."""

    predicate: Callable[[Any], bool]
    description: str | None = None

    def test(self, subject: Any) -> bool:
        return bool(self.predicate(subject))

    def __repr__(self) -> str:
        name = self.description or getattr(self.predicate, "__name__", "predicate")
        return f"<{name}>"


@dataclass(frozen=True)
class Literal:
    """Query argument compared literally, even if it looks like a matcher."""

    value: Any

    def __repr__(self) -> str:
        return repr(self.value)


ANY = Matches(lambda _: True, "ANY")


def any_value() -> Matches:
    return ANY


def instance_of(*types: type) -> Matches:
    names = " | ".join(t.__name__ for t in types)
    return Matches(lambda value: isinstance(value, types), f"instance of {names}")


def arg_that(predicate: Callable[[Any], bool], description: str | None = None) -> Matches:
    return Matches(predicate, description)


def _has_matches_method(arg: Any) -> bool:
    if isinstance(arg, type):
        return False
    return callable(getattr(arg, "matches", None))


def argument_matches(query_arg: Any, stored_arg: Any) -> bool:
    if isinstance(query_arg, Matches):
        return query_arg.test(stored_arg)
    if isinstance(query_arg, Literal):
        return structurally_equal(query_arg.value, stored_arg)
    if _has_matches_method(query_arg):
        return bool(query_arg.matches(stored_arg))
    return structurally_equal(query_arg, stored_arg)


def call_matches(stored: Call[Any], query: Call[Any]) -> bool:
    if stored.identifier != query.identifier or len(stored.args) != len(query.args):
        return False
    return all(argument_matches(q, s) for q, s in zip(query.args, stored.args))


def resolve(query: Call[T], stored_calls: Iterable[Call[T]]) -> Call[T] | None:
    """Return the single stored call matched by ``query``, or None.

    Raises:
        AmbiguousCallError: more than one stored call matches.
    """
    candidates = [stored for stored in stored_calls if call_matches(stored, query)]
    if len(candidates) > 1:
        raise AmbiguousCallError(query, candidates)
    if candidates:
        logger.debug("Resolved %s to registered call %s", query, candidates[0])
        return candidates[0]
    return None
