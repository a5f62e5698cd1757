from __future__ import annotations

import inspect
import logging
import os
import traceback
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

from callbook.call import Call, Occurrence
from callbook.config import Settings
from callbook.diagnostics import describe_identifier, render_calls
from callbook.errors import CallsConfigurationError
from callbook.matching import resolve

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PACKAGE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "")


def is_internal_frame(filename: str) -> bool:
    return os.path.abspath(filename).startswith(_PACKAGE_DIR)


def capture_context(depth: int = 0) -> traceback.StackSummary:
    """Stack at the point of registration, without this package's own frames."""
    frames = [
        frame
        for frame in traceback.extract_stack()
        if not is_internal_frame(frame.filename)
    ]
    if depth:
        frames = frames[-depth:]
    return traceback.StackSummary.from_list(frames)


class CallRegistry(Generic[T]):
    """Registered invocations on one mock, keyed by call.

    Common base of the counting (``CallsRegistry``) and the ordered
    (``StrictCallsRegistry``) verifiers. A mock registers every invocation it
    receives; the test then verifies them through the subclass API.

    Args:
        identifier_type: When given, every registered or queried identifier must
                         be an instance of this type. Fixed for the registry's
                         lifetime.
        capture_context: Capture a stack trace per invocation. Defaults to
                         CALLBOOK_CAPTURE_CONTEXT.
        context_depth:   Frames kept per trace (0 = all). Defaults to
                         CALLBOOK_CONTEXT_DEPTH.
        include_context: Whether failure listings show the stack traces.
    """

    def __init__(
        self,
        identifier_type: type[T] | None = None,
        *,
        capture_context: bool | None = None,
        context_depth: int | None = None,
        include_context: bool = True,
    ) -> None:
        settings = Settings.from_env()
        self._identifier_type = identifier_type
        self._capture_context = (
            settings.capture_context if capture_context is None else capture_context
        )
        self._context_depth = (
            settings.context_depth if context_depth is None else context_depth
        )
        self._include_context = include_context
        self._calls: dict[Call[T], list[Occurrence]] = {}
        self._sequence_no = 0

    @property
    def identifier_type(self) -> type[T] | None:
        return self._identifier_type

    # ------------------------------------------------------------------ #
    # Registration                                                         #
    # ------------------------------------------------------------------ #

    def register_call(self, identifier: T, args: Sequence[Any] | None) -> None:
        """Register one invocation of ``identifier`` with ``args``.

        ``args`` must be given explicitly; use ``()`` for a call without
        arguments. None raises CallsConfigurationError.
        """
        self.register(Call(identifier, args))  # type: ignore[arg-type]

    def register(self, call: Call[T]) -> None:
        self._check_identifier(call.identifier)
        context = (
            capture_context(self._context_depth) if self._capture_context else None
        )
        occurrence = Occurrence(self._sequence_no, context)
        self._sequence_no += 1
        self._calls.setdefault(call, []).append(occurrence)
        logger.debug(
            "Registered %s (invocation #%d), called from: %s",
            call,
            occurrence.sequence_no,
            context[-1] if context else "<no stack trace captured>",
        )

    def register_caller(self, args: Sequence[Any] | None) -> None:
        """Register an invocation of the calling function, identified by its name.

        Only for registries keyed by ``str`` (or untyped):

            def charge(self, who, amount):
                self.calls.register_caller((who, amount))
        """
        if self._identifier_type not in (None, str):
            raise CallsConfigurationError(
                "Inferring the called function requires a registry keyed by str, "
                f"this one is keyed by {self._identifier_type.__name__}."
            )
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        if caller is None:
            raise CallsConfigurationError(
                "Cannot infer the calling function: no Python frame available. "
                "Use register_call(identifier, args) instead."
            )
        name = caller.f_code.co_name
        del frame, caller
        self.register_call(name, args)  # type: ignore[arg-type]

    # ------------------------------------------------------------------ #
    # Lookup                                                               #
    # ------------------------------------------------------------------ #

    def _check_identifier(self, identifier: Any) -> None:
        if self._identifier_type is not None and not isinstance(
            identifier, self._identifier_type
        ):
            raise CallsConfigurationError(
                f"Unsupported identifier {identifier!r} of type {type(identifier).__name__}: "
                f"this registry is keyed by {self._identifier_type.__name__}."
            )

    def _resolve(self, query: Call[T]) -> Call[T] | None:
        self._check_identifier(query.identifier)
        return resolve(query, self._calls)

    def occurrences(self, identifier: T, *args: Any) -> list[Occurrence]:
        """Occurrences of the registered call matched by the query (may be empty)."""
        found = self._resolve(Call(identifier, args))
        return list(self._calls[found]) if found is not None else []

    def calls(self) -> list[Call[T]]:
        return list(self._calls)

    def __len__(self) -> int:
        return len(self._calls)

    # ------------------------------------------------------------------ #
    # Reporting                                                            #
    # ------------------------------------------------------------------ #

    def _use_context(self, include_context: bool | None) -> bool:
        return self._include_context if include_context is None else include_context

    def report(
        self,
        include_context: bool | None = None,
        predicate: Callable[[Call[T]], bool] | None = None,
    ) -> str:
        """Listing of the registered calls (all of them unless filtered)."""
        return render_calls(
            self._calls.items(), self._use_context(include_context), predicate
        )

    def _log_same_identifier(self, identifier: T, level: int = logging.INFO) -> None:
        logger.log(
            level,
            "Registered invocations for %s:\n%s",
            describe_identifier(identifier),
            self.report(predicate=lambda call: call.identifier == identifier)
            or " (none)",
        )

    def verify_no_more_invocations(self, include_context: bool | None = None) -> bool:
        """True when every registered call has been verified and removed."""
        if not self._calls:
            return True
        logger.error(
            "Calls remaining (that were not removed):\n%s",
            self.report(include_context),
        )
        return False

    def reset(self) -> None:
        self._calls.clear()
        self._sequence_no = 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(calls={len(self._calls)}, "
            f"next_sequence_no={self._sequence_no})"
        )
