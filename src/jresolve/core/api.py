"""
Programmatic API for jresolve.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from jresolve.config.loader import Settings, load_settings
from jresolve.core.engine import ResolutionEngine
from jresolve.core.external import CommandRunner, make_shell_runner
from jresolve.core.flatten import FlatConfig, flatten, load_document, unflatten
from jresolve.core.handlers import HandlerRegistry, build_default_registry
from jresolve.exceptions import InvalidDocumentError
from jresolve.utils.logging import get_logger

logger = get_logger("jresolve.core.api")

# Receives (stage, mapping) for the diagnostic snapshots:
# "flat", "pending", "internal", "resolved"
StageObserver = Callable[[str, FlatConfig], None]


def build_engine(
    flat: FlatConfig,
    settings: Settings | None = None,
    *,
    run_command: CommandRunner | None = None,
    environ: Mapping[str, str] | None = None,
    registry: HandlerRegistry | None = None,
    external: bool | None = None,
) -> ResolutionEngine:
    """Create a resolution session configured from settings."""
    settings = settings or load_settings()
    return ResolutionEngine(
        flat,
        registry=registry if registry is not None else build_default_registry(),
        run_command=run_command or make_shell_runner(settings.shell_executable),
        environ=environ,
        unique_match=settings.unique_match,
        external=settings.external if external is None else external,
        max_substitutions=settings.max_substitutions,
    )


def resolve_document(
    doc: Any,
    *,
    settings: Settings | None = None,
    run_command: CommandRunner | None = None,
    environ: Mapping[str, str] | None = None,
    registry: HandlerRegistry | None = None,
    observer: StageObserver | None = None,
) -> dict | list:
    """
    Resolve every placeholder in a document.

    Args:
        doc: Parsed document (dict or list) or JSON text
        settings: Settings (default: load_settings())
        run_command: Executes $(...) payloads (default: configured shell)
        environ: Environment for $NAME (default: os.environ)
        registry: Error handlers (default: build_default_registry())
        observer: Optional callback receiving intermediate flat maps

    Returns:
        Document with the same shape and every placeholder substituted

    Examples:
        >>> resolve_document({"x": "${y}", "y": "hello"})
        {'x': 'hello', 'y': 'hello'}
    """
    settings = settings or load_settings()
    if isinstance(doc, (str, bytes, bytearray)):
        doc = load_document(doc)
    flat = flatten(doc)
    if observer:
        observer("flat", dict(flat))

    engine = build_engine(flat, settings, run_command=run_command, environ=environ, registry=registry)
    if observer:
        observer("pending", {key: flat[key] for key in engine.pending()})
        if engine.external:
            # Snapshot of internal-only resolution on a copy, no side effects
            internal = build_engine(dict(flat), settings, environ=environ, registry=registry, external=False)
            observer("internal", internal.resolve_all())

    engine.resolve_all()
    if observer:
        observer("resolved", dict(flat))
    logger.debug(f"Resolved {len(flat)} keys")
    return unflatten(flat, type(doc))


def resolve_file(path: str | Path, **kwargs: Any) -> dict | list:
    """Read a JSON file and resolve it; keyword arguments as resolve_document."""
    return resolve_document(read_document(path), **kwargs)


def read_document(path: str | Path) -> dict | list:
    """Read and parse a JSON document from disk."""
    path = Path(path)
    try:
        text = path.read_bytes()
    except FileNotFoundError as e:
        raise InvalidDocumentError(f"Document not found: {path}", details={"path": str(path)}) from e
    except IsADirectoryError as e:
        raise InvalidDocumentError(f"Document path is a directory: {path}", details={"path": str(path)}) from e
    return load_document(text)


def resolve_key(
    doc: Any,
    key: str,
    *,
    settings: Settings | None = None,
    run_command: CommandRunner | None = None,
    environ: Mapping[str, str] | None = None,
    registry: HandlerRegistry | None = None,
) -> Any:
    """
    Resolve a single key of a document.

    ``key`` may be a full path, a shorthand or a ``path.join(sep)``
    expression. Only the placeholders the key depends on are evaluated.
    """
    engine = build_engine(flatten(doc), settings, run_command=run_command, environ=environ, registry=registry)
    logger.info(f"Resolving path: {key}")
    return engine.lookup(key)
