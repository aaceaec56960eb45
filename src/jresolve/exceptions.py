"""
jresolve exception hierarchy.

All resolution failures inherit from ResolverError, so callers can catch any
failure with a single base class while still handling individual kinds.
Every error carries an ``ErrorKind`` tag (used by the handler registry) and
the process exit code the CLI reports for it.

Hierarchy::

    ResolverError
    ├── ConfigurationError        - settings file loading / validation
    ├── InvalidDocumentError      - input is not a JSON object or array
    ├── KeyNotFoundError          - no key matches a reference
    ├── AmbiguousKeyError         - shorthand matches more than one key
    ├── CircularDependencyError   - reference chain revisits a key
    ├── ShellCommandError         - $(...) exited non-zero
    ├── EnvVarMissingError        - $NAME unset or empty
    ├── SubstitutionLimitError    - a value kept growing new placeholders
    └── ParentResolutionError     - nested reference failed unexpectedly
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure kinds understood by the handler registry."""

    CONFIGURATION = "Configuration"
    INVALID_DOCUMENT = "InvalidDocument"
    KEY_NOT_FOUND = "KeyNotFound"
    AMBIGUOUS_KEY = "AmbiguousKey"
    CIRCULAR_DEPENDENCY = "CircularDependency"
    SHELL_COMMAND_FAILED = "ShellCommandFailed"
    ENV_VAR_MISSING = "EnvVarMissing"
    SUBSTITUTION_LIMIT = "SubstitutionLimit"
    PARENT_RESOLUTION_FAILURE = "ParentResolutionFailure"


class ResolverError(Exception):
    """Base exception for all jresolve errors."""

    kind: ErrorKind = ErrorKind.PARENT_RESOLUTION_FAILURE
    exit_code: int = 1

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(ResolverError):
    """Raised when the settings file cannot be loaded or is invalid."""

    kind = ErrorKind.CONFIGURATION
    exit_code = 2


# --- Document ----------------------------------------------------------------


class InvalidDocumentError(ResolverError):
    """Raised when the input is not a JSON-decodable object or array."""

    kind = ErrorKind.INVALID_DOCUMENT
    exit_code = 3


# --- Key lookup --------------------------------------------------------------


class KeyNotFoundError(ResolverError):
    """Raised when no flattened key matches a (shorthand) reference."""

    kind = ErrorKind.KEY_NOT_FOUND
    exit_code = 6

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(message or f"Key not found: '{key}'", details={"key": key})
        self.key = key


class AmbiguousKeyError(ResolverError):
    """Raised when a shorthand matches several keys in unique-match mode."""

    kind = ErrorKind.AMBIGUOUS_KEY
    exit_code = 5

    def __init__(self, key: str, candidates: list[str]) -> None:
        super().__init__(
            f"Ambiguous key '{key}' matches {len(candidates)} keys: {', '.join(candidates)}\n"
            f"  Suggestion: Use a longer suffix or the full path",
            details={"key": key, "candidates": list(candidates)},
        )
        self.key = key
        self.candidates = list(candidates)


# --- Cycles ------------------------------------------------------------------


class CircularDependencyError(ResolverError):
    """Raised when a reference chain loops back to a key being resolved.

    ``stack`` is the resolution path in discovery order, ``key`` the
    back-reference that closed the loop.
    """

    kind = ErrorKind.CIRCULAR_DEPENDENCY
    exit_code = 12

    def __init__(self, key: str, stack: list[str]) -> None:
        chain = " -> ".join([*stack, key])
        super().__init__(
            f"Circular dependency detected: {chain}",
            details={"key": key, "stack": list(stack)},
        )
        self.key = key
        self.stack = list(stack)

    @property
    def cycle(self) -> list[str]:
        """The looping part of the stack, closed by the back-reference."""
        start = self.stack.index(self.key) if self.key in self.stack else 0
        return [*self.stack[start:], self.key]

    def report(self) -> str:
        """Render the discovery-ordered path plus the closing back-reference."""
        rule = "-" * 48
        lines = [
            rule,
            "ERROR: CIRCULAR DEPENDENCY DETECTED",
            f"The key '${{{self.key}}}' creates a loop.",
            rule,
            "Resolution Path (Order of discovery):",
        ]
        for i, key in enumerate(self.stack, start=1):
            lines.append(f"  {i}. ${{{key}}}")
        lines.append(f"  >> ${{{self.key}}} (BACK-REFERENCE)")
        lines.append(rule)
        return "\n".join(lines)


# --- External substitutions --------------------------------------------------


class ShellCommandError(ResolverError):
    """Raised when a $(...) command exits with a non-zero status."""

    kind = ErrorKind.SHELL_COMMAND_FAILED
    exit_code = 7

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        message = f"Shell command failed with exit status {returncode}: {command}"
        if stderr.strip():
            message += f"\n  stderr: {stderr.strip()}"
        super().__init__(
            message,
            details={"command": command, "returncode": returncode, "stderr": stderr},
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class EnvVarMissingError(ResolverError):
    """Raised when a $NAME environment variable is unset or empty."""

    kind = ErrorKind.ENV_VAR_MISSING
    exit_code = 8

    def __init__(self, name: str) -> None:
        super().__init__(f"Environment variable is not set: {name}", details={"name": name})
        self.name = name


class SubstitutionLimitError(ResolverError):
    """Raised when a value needs more substitutions than the configured limit.

    Happens when a command or variable expands to text that contains a new
    placeholder on every pass, e.g. ``A='$A-'``.
    """

    kind = ErrorKind.SUBSTITUTION_LIMIT
    exit_code = 9

    def __init__(self, key: str, limit: int, placeholder: str) -> None:
        super().__init__(
            f"Gave up on '{key}' after {limit} substitutions, last placeholder: {placeholder}\n"
            f"  Suggestion: Check for a command or variable whose output contains a placeholder",
            details={"key": key, "limit": limit, "placeholder": placeholder},
        )
        self.key = key
        self.limit = limit
        self.placeholder = placeholder


# --- Nested failures ---------------------------------------------------------


class ParentResolutionError(ResolverError):
    """Raised when resolving a nested reference fails outside the known kinds."""

    kind = ErrorKind.PARENT_RESOLUTION_FAILURE
    exit_code = 1

    def __init__(self, key: str, placeholder: str, *, cause: Exception | None = None) -> None:
        message = f"Failed to resolve nested template {placeholder} in key: {key}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message, details={"key": key, "placeholder": placeholder})
        self.key = key
        self.placeholder = placeholder
        if cause is not None:
            self.__cause__ = cause
