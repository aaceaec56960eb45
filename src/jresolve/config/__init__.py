"""
Settings management: defaults, YAML settings file, overrides.
"""

from jresolve.config.loader import Settings, load_settings

__all__ = [
    "load_settings",
    "Settings",
]
