"""
Resolution engine.

Substitutes placeholders in a flattened document until every value is
concrete. Internal references are resolved depth-first, with a
session-owned stack for cycle detection and a memo of keys already
resolved. Failures are offered to the handler registry, which may recover
(array joins) or report and re-raise (cycles).
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from enum import StrEnum
from typing import Any

from jresolve.core.external import CommandRunner, read_env_var, run_shell_command
from jresolve.core.flatten import FlatConfig
from jresolve.core.handlers import HandlerRegistry, build_default_registry
from jresolve.core.keys import KeyResolver
from jresolve.core.scanner import (
    ALL_KINDS,
    INTERNAL_KINDS,
    Placeholder,
    PlaceholderKind,
    find_all,
    has_placeholder,
    scan,
)
from jresolve.exceptions import (
    CircularDependencyError,
    KeyNotFoundError,
    ParentResolutionError,
    ResolverError,
    SubstitutionLimitError,
)
from jresolve.utils.logging import get_logger

logger = get_logger("jresolve.core.engine")

DEFAULT_MAX_SUBSTITUTIONS = 1000


class KeyState(StrEnum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    FAILED = "failed"


class ResolutionStack:
    """Keys currently being resolved, in discovery order, with O(1) membership."""

    def __init__(self) -> None:
        self._order: list[str] = []
        self._active: set[str] = set()

    def push(self, key: str) -> None:
        if key in self._active:
            raise CircularDependencyError(key, self._order)
        self._order.append(key)
        self._active.add(key)

    def pop(self) -> str:
        key = self._order.pop()
        self._active.discard(key)
        return key

    def __contains__(self, key: object) -> bool:
        return key in self._active

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)


def stringify(value: Any) -> str:
    """Text spliced in place of a reference: strings verbatim, others as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class ResolutionEngine:
    """
    One resolution session over a flat document.

    The flat mapping is updated in place as keys resolve.

    Args:
        flat: Flattened document
        key_resolver: Key lookup (default: KeyResolver over ``flat``)
        registry: Error handlers (default: build_default_registry())
        run_command: Executes $(...) payloads (default: system shell)
        environ: Environment for $NAME lookups (default: os.environ)
        unique_match: Fail on ambiguous shorthands (default: True)
        external: Substitute shell commands and env vars; False resolves
            internal references only (dry run)
        max_substitutions: Substitutions allowed per value before giving up
    """

    def __init__(
        self,
        flat: FlatConfig,
        *,
        key_resolver: KeyResolver | None = None,
        registry: HandlerRegistry | None = None,
        run_command: CommandRunner | None = None,
        environ: Mapping[str, str] | None = None,
        unique_match: bool = True,
        external: bool = True,
        max_substitutions: int = DEFAULT_MAX_SUBSTITUTIONS,
    ):
        self.flat = flat
        self.key_resolver = key_resolver or KeyResolver(flat, unique_match=unique_match)
        self.registry = registry if registry is not None else build_default_registry()
        self.run_command = run_command or run_shell_command
        self.environ = environ
        self.external = external
        self.max_substitutions = max_substitutions
        self.stack = ResolutionStack()
        self.states: dict[str, KeyState] = {}

    @property
    def kinds(self) -> tuple[PlaceholderKind, ...]:
        return ALL_KINDS if self.external else INTERNAL_KINDS

    def state(self, key: str) -> KeyState:
        return self.states.get(key, KeyState.UNVISITED)

    def pending(self) -> list[str]:
        """Keys whose values still contain placeholders, in document order."""
        return [
            key
            for key, value in self.flat.items()
            if self.state(key) is not KeyState.RESOLVED and has_placeholder(value, self.kinds)
        ]

    def resolve_all(self) -> FlatConfig:
        """Resolve every pending value and return the (updated) flat mapping."""
        pending = self.pending()
        if not pending:
            logger.debug("Nothing to resolve")
            return self.flat
        logger.info(f"Resolving {len(pending)} pending values")
        for key in pending:
            self.resolve_key(key)
        return self.flat

    def resolve_key(self, key: str) -> Any:
        """
        Resolve the value stored at a full path.

        Memoized: a key resolved earlier in this session is returned as is.
        """
        if self.state(key) is KeyState.RESOLVED:
            return self.flat[key]
        try:
            self.stack.push(key)
        except CircularDependencyError as e:
            return self.registry.handle(e, self)

        self.states[key] = KeyState.IN_PROGRESS
        logger.debug(f"Resolving path: {key}")
        try:
            value = self.flat[key]
            if isinstance(value, str):
                value = self._substitute(value, key)
                self.flat[key] = value
        except Exception:
            self.states[key] = KeyState.FAILED
            raise
        finally:
            self.stack.pop()

        self.states[key] = KeyState.RESOLVED
        if not self.external and has_placeholder(value):
            for p in find_all(value):
                logger.info(f"Dry run: leaving {p.text} unresolved in '{key}'")
        return value

    def lookup(self, expression: str) -> Any:
        """
        Resolve a reference expression to its value.

        Full paths, shorthands and ``path.join(sep)`` are accepted.
        """
        try:
            target = self.key_resolver.resolve(expression)
        except KeyNotFoundError as e:
            return self.registry.handle(e, self)
        return self.resolve_key(target)

    def expand(self, text: str) -> str:
        """Substitute every placeholder in a free-standing string."""
        return self._substitute(text, None)

    def _substitute(self, text: str, owner: str | None) -> str:
        for _ in range(self.max_substitutions):
            placeholder = scan(text, self.kinds)
            if placeholder is None:
                return text
            updated = placeholder.splice(text, self._replacement(placeholder, owner))
            if updated == text:
                logger.warning(f"Substitution of {placeholder.text} made no progress in '{owner or text}'")
                return text
            text = updated
        placeholder = scan(text, self.kinds)
        if placeholder is None:
            return text
        raise SubstitutionLimitError(owner or text, self.max_substitutions, placeholder.text)

    def _replacement(self, placeholder: Placeholder, owner: str | None) -> str:
        if placeholder.kind is PlaceholderKind.JSON_REF:
            try:
                return stringify(self.lookup(placeholder.payload.strip()))
            except ResolverError:
                raise
            except Exception as e:
                raise ParentResolutionError(owner or "<value>", placeholder.text, cause=e) from e
        if placeholder.kind is PlaceholderKind.SHELL_COMMAND:
            return self.run_command(placeholder.payload)
        return read_env_var(placeholder.payload, self.environ)
