"""
Lookup of full and shorthand keys in a flattened document.

A shorthand is any trailing run of whole path segments: ``tags`` finds
``build.tags`` but never ``system_tags_backup``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from jresolve.exceptions import AmbiguousKeyError, KeyNotFoundError
from jresolve.utils.logging import get_logger

logger = get_logger("jresolve.core.keys")


class KeyResolver:
    """Resolves references against the keys of a flat mapping."""

    def __init__(self, flat: Mapping[str, Any], unique_match: bool = True):
        self.flat = flat
        self.unique_match = unique_match

    def matches(self, key: str) -> list[str]:
        """All keys that end with ``key`` on a segment boundary, in map order."""
        pattern = re.compile(rf"(^|\.){re.escape(key)}$")
        return [full for full in self.flat if pattern.search(full)]

    def resolve(self, key: str) -> str:
        """
        Return the unique full path for a full or shorthand key.

        Raises:
            KeyNotFoundError: nothing matches
            AmbiguousKeyError: several keys match and unique_match is on
        """
        if key in self.flat:
            return key
        return self._pick(key, self.matches(key))

    def resolve_array(self, key: str) -> list[str]:
        """
        Return the element keys of the scalar array addressed by ``key``.

        ``list`` yields ``['list[0]', 'list[1]', ...]`` ordered by index.
        Arrays nested in objects can be addressed by shorthand as well.
        Raises KeyNotFoundError if any element is an object or an array.
        """
        pattern = re.compile(rf"(^|\.){re.escape(key)}\[(\d+)\]$")
        groups: dict[str, list[tuple[int, str]]] = {}
        for full in self.flat:
            m = pattern.search(full)
            if m is None:
                continue
            prefix = full[: full.rindex("[")]
            groups.setdefault(prefix, []).append((int(m.group(2)), full))

        if key in groups:
            array_path = key
        else:
            array_path = self._pick(key, list(groups))
        elements = [full for _, full in sorted(groups[array_path])]

        # Objects and nested arrays cannot be joined
        leaves = set(elements)
        for full, value in self.flat.items():
            if full.startswith(f"{array_path}[") and (full not in leaves or isinstance(value, (dict, list))):
                raise KeyNotFoundError(key, f"Cannot join '{key}': element '{full}' is not a scalar")
        return elements

    def _pick(self, key: str, candidates: list[str]) -> str:
        if not candidates:
            raise KeyNotFoundError(key)
        if len(candidates) > 1:
            if self.unique_match:
                raise AmbiguousKeyError(key, candidates)
            logger.debug(f"Shorthand '{key}' matches {candidates}, using '{candidates[0]}'")
        return candidates[0]
