"""Command line tools for evaluating sensor logs.

The Typer application is ``cli.app.app``; run it as ``sensor-log``.
"""

from importlib import import_module
from types import ModuleType

_SUBMODULES = frozenset({"app", "client", "config", "render"})


# Submodules resolve lazily and are never shadowed by objects they define, so
# ``cli.app`` stays the module that tests patch names on.
def __getattr__(name: str) -> ModuleType:
    if name in _SUBMODULES:
        return import_module(f"cli.{name}")
    raise AttributeError(f"module 'cli' has no attribute {name!r}")


__all__ = sorted(_SUBMODULES)
