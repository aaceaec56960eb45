"""
Flattening of nested JSON documents into addressable paths.

Paths join object fields with ``.`` and render array indices as ``[N]``
suffixes, e.g. ``build.args[0]`` or ``[1].name`` for a top-level array.
Empty objects and arrays are kept as leaves so the shape survives a
round trip.
"""

from __future__ import annotations

import json
import re
from typing import Any

from jresolve.exceptions import InvalidDocumentError

FlatConfig = dict[str, Any]

_SCALAR_TYPES = (str, int, float, bool, type(None))
_TOKEN_RE = re.compile(r"\[(\d+)\]|([^.\[\]]+)")
_RESERVED_RE = re.compile(r"[.\[\]]")


def load_document(text: str | bytes) -> dict | list:
    """Parse JSON text, raising InvalidDocumentError on bad input."""
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(
            f"Error parsing JSON at line {e.lineno}, column {e.colno}:\n  {e.msg}",
            details={"line": e.lineno, "column": e.colno},
        ) from e
    except UnicodeDecodeError as e:
        raise InvalidDocumentError(f"Document is not valid UTF-8 text: {e}") from e
    if not isinstance(doc, (dict, list)):
        raise InvalidDocumentError(
            f"Document root must be a JSON object or array, got {type(doc).__name__}"
        )
    return doc


def flatten(doc: Any) -> FlatConfig:
    """
    Flatten a nested document into a path -> scalar mapping.

    Args:
        doc: Parsed document (dict or list) or JSON text

    Returns:
        Flat mapping in document order
    """
    if isinstance(doc, (str, bytes, bytearray)):
        doc = load_document(doc)
    if not isinstance(doc, (dict, list)):
        raise InvalidDocumentError(
            f"Document root must be a JSON object or array, got {type(doc).__name__}"
        )
    flat: FlatConfig = {}
    _walk(doc, "", flat)
    return flat


def _walk(node: Any, prefix: str, flat: FlatConfig) -> None:
    if isinstance(node, dict):
        if not node and prefix:
            flat[prefix] = {}
            return
        for key, value in node.items():
            if not isinstance(key, str):
                raise InvalidDocumentError(f"Object keys must be strings, got {key!r} at '{prefix}'")
            if not key or _RESERVED_RE.search(key):
                raise InvalidDocumentError(
                    f"Object key {key!r} at '{prefix}' cannot be addressed by a path\n"
                    f"  Suggestion: Use non-empty keys without '.', '[' or ']'",
                    details={"path": prefix, "key": key},
                )
            _walk(value, f"{prefix}.{key}" if prefix else key, flat)
    elif isinstance(node, list):
        if not node and prefix:
            flat[prefix] = []
            return
        for i, value in enumerate(node):
            _walk(value, f"{prefix}[{i}]", flat)
    elif isinstance(node, _SCALAR_TYPES):
        flat[prefix] = node
    else:
        raise InvalidDocumentError(
            f"Unsupported value of type {type(node).__name__} at '{prefix}'",
            details={"path": prefix},
        )


def split_path(path: str) -> list[str | int]:
    """Tokenize a flat path: ``a.b[2].c`` -> ``['a', 'b', 2, 'c']``."""
    tokens: list[str | int] = []
    for index, name in _TOKEN_RE.findall(path):
        tokens.append(int(index) if index else name)
    return tokens


def set_path(root: dict | list, tokens: list[str | int], value: Any) -> None:
    """Write value into root at tokens, creating containers on the way."""
    node: Any = root
    for i, token in enumerate(tokens):
        last = i == len(tokens) - 1
        child: Any = value if last else ([] if isinstance(tokens[i + 1], int) else {})
        if isinstance(token, int):
            if not isinstance(node, list):
                raise InvalidDocumentError(f"Index [{token}] applied to a non-array at {tokens[:i]}")
            while len(node) <= token:
                node.append(None)
            if last or node[token] is None:
                node[token] = child
            node = node[token]
        else:
            if not isinstance(node, dict):
                raise InvalidDocumentError(f"Field '{token}' applied to a non-object at {tokens[:i]}")
            if last or token not in node:
                node[token] = child
            node = node[token]


def unflatten(flat: FlatConfig, root_type: type = dict) -> dict | list:
    """
    Rebuild the nested document from a flat mapping.

    The root container follows the first path; ``root_type`` is returned
    empty when there are no paths, e.g. for a top-level ``[]``.

    Insertion order does not matter; arrays are padded with None while
    their elements arrive out of order.
    """
    root: dict | list | None = None
    for path, value in flat.items():
        tokens = split_path(path)
        if not tokens:
            continue
        if root is None:
            root = [] if isinstance(tokens[0], int) else {}
        if isinstance(value, (dict, list)):
            value = type(value)(value)
        set_path(root, tokens, value)
    return root if root is not None else root_type()
