from __future__ import annotations

import logging
from typing import Any, TypeVar

from callbook.call import Call
from callbook.diagnostics import describe_identifier, ordinal
from callbook.errors import RegistryInvariantError
from callbook.registry import CallRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StrictCallsRegistry(CallRegistry[T]):
    """Ordered verification: "this call happened next".

    Verification must replay the invocations in exactly the order they were
    registered, across all identifiers of the registry. Each successful
    verification consumes one invocation.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._verification_no = 0

    @property
    def cursor(self) -> int:
        """Sequence number of the invocation due for verification next."""
        return self._verification_no

    def verify_strictly_and_remove_call(self, identifier: T, *args: Any) -> bool:
        return self._is_sequentially_called(Call(identifier, args))

    def verify_strictly_and_remove(self, call: Call[T]) -> bool:
        return self._is_sequentially_called(call)

    def _is_sequentially_called(self, query: Call[T]) -> bool:
        found = self._resolve(query)
        if found is None:
            logger.error(
                "%s was expected as the %s invocation on this mock, but was never invoked.",
                query,
                ordinal(self._verification_no + 1),
            )
            self._log_same_identifier(query.identifier, logging.ERROR)
            return False

        occurrences = self._calls[found]
        due = [
            i
            for i, occurrence in enumerate(occurrences)
            if occurrence.sequence_no == self._verification_no
        ]
        if len(due) > 1:
            self._log_same_identifier(found.identifier, logging.ERROR)
            raise RegistryInvariantError(found, self._verification_no)
        if not due:
            logger.error(
                "%s was expected as the %s invocation on this mock, but was invoked as the %s.",
                found,
                ordinal(self._verification_no + 1),
                ", ".join(ordinal(o.sequence_no + 1) for o in occurrences),
            )
            self._log_same_identifier(found.identifier, logging.ERROR)
            return False

        del occurrences[due[0]]
        if not occurrences:
            del self._calls[found]
        logger.debug(
            "Verified %s as the %s invocation of %s",
            found,
            ordinal(self._verification_no + 1),
            describe_identifier(found.identifier),
        )
        self._verification_no += 1
        return True

    def reset(self) -> None:
        super().reset()
        self._verification_no = 0
