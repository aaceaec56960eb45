"""
Placeholder recognition.

Three grammars, checked in priority order:

- ``${path}``  internal reference to another key (innermost first)
- ``$(cmd)``   shell command, replaced by its standard output (balanced parens)
- ``$NAME``    environment variable
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum


class PlaceholderKind(StrEnum):
    JSON_REF = "json_ref"
    SHELL_COMMAND = "shell_command"
    ENV_VAR = "env_var"


PATTERNS: dict[PlaceholderKind, re.Pattern[str]] = {
    PlaceholderKind.JSON_REF: re.compile(r"\$\{([^{}]+)\}"),
    PlaceholderKind.ENV_VAR: re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)"),
}

# $( opens a command that runs to its balanced closing parenthesis
SHELL_OPEN = re.compile(r"\$\(")

ALL_KINDS: tuple[PlaceholderKind, ...] = (
    PlaceholderKind.JSON_REF,
    PlaceholderKind.SHELL_COMMAND,
    PlaceholderKind.ENV_VAR,
)
INTERNAL_KINDS: tuple[PlaceholderKind, ...] = (PlaceholderKind.JSON_REF,)


@dataclass(frozen=True)
class Placeholder:
    """A placeholder found in a string."""

    kind: PlaceholderKind
    payload: str
    text: str
    start: int
    end: int

    def splice(self, source: str, replacement: str) -> str:
        """Replace this placeholder's span in source."""
        return source[: self.start] + replacement + source[self.end :]


def _from_match(kind: PlaceholderKind, m: re.Match[str]) -> Placeholder:
    return Placeholder(kind=kind, payload=m.group(1), text=m.group(0), start=m.start(), end=m.end())


def _closing_paren(text: str, start: int) -> int | None:
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    return None


def _shell_commands(text: str) -> Iterator[Placeholder]:
    """
    Innermost ``$(...)`` commands, left to right.

    Parentheses inside a command are balanced, so ``$(python -c 'print(1)')``
    is one command. A ``$(`` without a closing parenthesis is plain text.
    """
    opens = [m.start() for m in SHELL_OPEN.finditer(text)]
    for start in opens:
        close = _closing_paren(text, start + 1)
        if close is None or close == start + 2:
            continue
        if any(start < other < close for other in opens):
            continue
        yield Placeholder(
            kind=PlaceholderKind.SHELL_COMMAND,
            payload=text[start + 2 : close],
            text=text[start : close + 1],
            start=start,
            end=close + 1,
        )


def _find(kind: PlaceholderKind, text: str) -> Iterator[Placeholder]:
    if kind is PlaceholderKind.SHELL_COMMAND:
        return _shell_commands(text)
    return (_from_match(kind, m) for m in PATTERNS[kind].finditer(text))


def scan(text: str, kinds: tuple[PlaceholderKind, ...] = ALL_KINDS) -> Placeholder | None:
    """
    Find the next placeholder to substitute.

    The highest-priority kind present anywhere in the string wins; within a
    kind the leftmost match is returned.
    """
    for kind in kinds:
        placeholder = next(_find(kind, text), None)
        if placeholder is not None:
            return placeholder
    return None


def has_placeholder(value: object, kinds: tuple[PlaceholderKind, ...] = ALL_KINDS) -> bool:
    """True if value is a string containing at least one placeholder."""
    return isinstance(value, str) and "$" in value and scan(value, kinds) is not None


def find_all(text: str) -> list[Placeholder]:
    """Every placeholder in text, ordered by position."""
    found = [p for kind in ALL_KINDS for p in _find(kind, text)]
    return sorted(found, key=lambda p: (p.start, ALL_KINDS.index(p.kind)))
