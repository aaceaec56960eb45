"""
Error handler registry.

Maps an ErrorKind to a function that may recover from the error by
returning a replacement string, or re-raise it. One registry is built per
resolution session and handed to the engine.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from jresolve.exceptions import (
    CircularDependencyError,
    ErrorKind,
    KeyNotFoundError,
    ResolverError,
)
from jresolve.utils.logging import get_logger

if TYPE_CHECKING:
    from jresolve.core.engine import ResolutionEngine

logger = get_logger("jresolve.core.handlers")

ErrorHandler = Callable[[ResolverError, "ResolutionEngine"], str]

JOIN_RE = re.compile(r"^(?P<path>.+?)\.join\((?P<separator>.*)\)$", re.DOTALL)


class HandlerRegistry:
    """Registry of recovery/report handlers keyed by error kind."""

    def __init__(self) -> None:
        self._handlers: dict[ErrorKind, ErrorHandler] = {}

    def register(self, kind: ErrorKind, handler: ErrorHandler) -> None:
        """Register (or replace) the handler for an error kind."""
        self._handlers[kind] = handler

    def get(self, kind: ErrorKind) -> ErrorHandler | None:
        return self._handlers.get(kind)

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def handle(self, error: ResolverError, engine: ResolutionEngine) -> str:
        """
        Offer an error to its handler.

        Returns the handler's replacement text; errors without a handler
        are re-raised unchanged.
        """
        handler = self._handlers.get(error.kind)
        if handler is None:
            raise error
        return handler(error, engine)


def parse_join(expression: str) -> tuple[str, str] | None:
    """Split ``path.join(sep)`` into (path, cleaned separator)."""
    m = JOIN_RE.match(expression)
    if m is None:
        return None
    separator = m.group("separator")
    if separator[:1] in ("'", '"'):
        separator = separator[1:]
    if separator[-1:] in ("'", '"'):
        separator = separator[:-1]
    separator = re.sub(r"[\n\r\t]", "", separator)
    return m.group("path"), separator


def array_join_handler(error: ResolverError, engine: ResolutionEngine) -> str:
    """Reinterpret a missing ``path.join(sep)`` key as an array join."""
    if not isinstance(error, KeyNotFoundError):
        raise error
    parsed = parse_join(error.key)
    if parsed is None:
        raise error
    path, separator = parsed

    try:
        element_keys = engine.key_resolver.resolve_array(path)
    except KeyNotFoundError:
        raise error from None

    parts = []
    for element_key in element_keys:
        value = engine.resolve_key(element_key)
        if value == "":
            continue
        parts.append(value if isinstance(value, str) else json.dumps(value))
    if not parts:
        raise error

    logger.debug(f"Joined {len(parts)} elements of '{path}' with {separator!r}")
    return separator.join(parts)


def circular_dependency_handler(error: ResolverError, engine: ResolutionEngine) -> str:
    """Report the cycle, then fail."""
    if isinstance(error, CircularDependencyError):
        logger.error(error.report())
    raise error


def build_default_registry() -> HandlerRegistry:
    """
    Build the registry used by a default resolution session.
    """
    registry = HandlerRegistry()
    registry.register(ErrorKind.KEY_NOT_FOUND, array_join_handler)
    registry.register(ErrorKind.CIRCULAR_DEPENDENCY, circular_dependency_handler)
    return registry
