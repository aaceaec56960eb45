#!/usr/bin/env python3
"""
Example script resolving the sample documents with the programmatic API.

Equivalent CLI:
    jresolve resolve basic/config.json
    jresolve get build/config.json command
"""

import json
from pathlib import Path

from jresolve import CircularDependencyError, ResolverError, resolve_document, resolve_file, resolve_key
from jresolve.config import load_settings

if __name__ == "__main__":
    here = Path(__file__).parent
    settings = load_settings(here / "jresolve.yaml")

    print(json.dumps(resolve_file(here / "basic" / "config.json", settings=settings), indent=2))

    build = json.loads((here / "build" / "config.json").read_text())
    print(resolve_key(build, "command", settings=settings))

    try:
        resolve_document({"a": "${b}", "b": "${a}"}, settings=settings)
    except CircularDependencyError as e:
        print(e.report())
    except ResolverError as e:
        print(f"Error: {e}")
