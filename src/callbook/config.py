from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_DEPTH = 12

_FALSE = {"0", "false", "no", "off"}
_TRUE = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _FALSE:
        return False
    if raw in _TRUE:
        return True
    logger.warning("Ignoring %s=%r: not a boolean (using %s)", name, raw, default)
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer (using %d)", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    """Registry settings.

    Args:
        capture_context: Capture a stack trace for every registered invocation.
                         Reads CALLBOOK_CAPTURE_CONTEXT (default on; 0/false/no/off disable).
        context_depth:   Frames kept per captured trace, 0 = all.
                         Reads CALLBOOK_CONTEXT_DEPTH.
    """

    capture_context: bool = True
    context_depth: int = DEFAULT_CONTEXT_DEPTH

    @classmethod
    def from_env(cls) -> Settings:
        capture = _env_flag("CALLBOOK_CAPTURE_CONTEXT", True)
        depth = _env_int("CALLBOOK_CONTEXT_DEPTH", DEFAULT_CONTEXT_DEPTH)
        return cls(capture_context=capture, context_depth=max(depth, 0))
