"""
Core resolution: flattening, key lookup, placeholder scanning, engine.
"""

from jresolve.core.api import build_engine, read_document, resolve_document, resolve_file, resolve_key
from jresolve.core.engine import ResolutionEngine, ResolutionStack
from jresolve.core.flatten import flatten, load_document, unflatten
from jresolve.core.handlers import HandlerRegistry, build_default_registry
from jresolve.core.keys import KeyResolver

__all__ = [
    "ResolutionEngine",
    "ResolutionStack",
    "KeyResolver",
    "HandlerRegistry",
    "build_default_registry",
    "build_engine",
    "flatten",
    "unflatten",
    "load_document",
    "read_document",
    "resolve_document",
    "resolve_file",
    "resolve_key",
]
