"""
jresolve - resolve ${key}, $(command) and $ENV placeholders in JSON configuration.
"""

__version__ = "0.1.0"

from jresolve.config import Settings, load_settings
from jresolve.core import (
    HandlerRegistry,
    KeyResolver,
    ResolutionEngine,
    build_default_registry,
    flatten,
    resolve_document,
    resolve_file,
    resolve_key,
    unflatten,
)
from jresolve.exceptions import (
    AmbiguousKeyError,
    CircularDependencyError,
    ConfigurationError,
    EnvVarMissingError,
    ErrorKind,
    InvalidDocumentError,
    KeyNotFoundError,
    ParentResolutionError,
    ResolverError,
    ShellCommandError,
    SubstitutionLimitError,
)
from jresolve.utils.logging import get_logger, setup_logging

__all__ = [
    # Resolution
    "resolve_document",
    "resolve_file",
    "resolve_key",
    "flatten",
    "unflatten",
    "ResolutionEngine",
    "KeyResolver",
    "HandlerRegistry",
    "build_default_registry",
    # Settings
    "Settings",
    "load_settings",
    # Exceptions
    "ResolverError",
    "ErrorKind",
    "ConfigurationError",
    "InvalidDocumentError",
    "KeyNotFoundError",
    "AmbiguousKeyError",
    "CircularDependencyError",
    "ShellCommandError",
    "EnvVarMissingError",
    "ParentResolutionError",
    "SubstitutionLimitError",
    # Logging
    "get_logger",
    "setup_logging",
]
