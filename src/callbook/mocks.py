from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Mock(Protocol):
    """Anything that can tell whether it still holds unverified invocations.

    Call registries satisfy this; so does any hand-written mock delegating to
    its registry.
    """

    def verify_no_more_invocations(self, include_context: bool | None = None) -> bool:
        ...


class MocksRegistry:
    """All mocks of one test, for a single "nothing left unverified" sweep.

    Mocks register themselves (or a provider, when the mock is created
    lazily), the test runs and verifies its calls, and at the end
    verify_no_more_invocations_anywhere() checks every mock at once.
    """

    def __init__(self, include_context: bool | None = None) -> None:
        self._include_context = include_context
        self._mocks: list[Mock] = []
        self._providers: list[Callable[[], Mock]] = []

    def register_mock(self, mock: Mock) -> bool:
        """Register ``mock``. Returns False if it was already registered."""
        if any(m is mock for m in self._mocks):
            return False
        self._mocks.append(mock)
        return True

    def register_provider(self, provider: Callable[[], Mock]) -> bool:
        """Register a zero-argument callable returning a mock, resolved at sweep time."""
        if any(p is provider for p in self._providers):
            return False
        self._providers.append(provider)
        return True

    def _resolve_providers(self) -> None:
        providers, self._providers = self._providers, []
        for provider in providers:
            self.register_mock(provider())

    @property
    def mocks(self) -> list[Mock]:
        self._resolve_providers()
        return list(self._mocks)

    def verify_no_more_invocations_anywhere(self) -> bool:
        """True when no registered mock holds unverified invocations.

        Every mock is asked (no short-circuit) so each one logs its leftovers.
        """
        results = [
            mock.verify_no_more_invocations(self._include_context)
            for mock in self.mocks
        ]
        clean = all(results)
        if not clean:
            logger.error(
                "%d of %d mocks have unverified invocations.",
                results.count(False),
                len(results),
            )
        return clean

    def summary(self) -> str:
        lines = []
        for mock in self.mocks:
            report = getattr(mock, "report", None)
            text = report(self._include_context) if callable(report) else ""
            if text:
                lines.append(f"{mock!r}:\n{text}")
        return "\n".join(lines) or "No unverified invocations."

    def reset_all(self) -> None:
        for mock in self.mocks:
            reset = getattr(mock, "reset", None)
            if callable(reset):
                reset()

    def __len__(self) -> int:
        return len(self._mocks) + len(self._providers)
