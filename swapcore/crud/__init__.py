"""CRUD package exports with lazy module loading.

These modules are the only code that queries the repository tables
directly; services compose them into transactions.
"""

from importlib import import_module

__all__ = ["user", "skill", "match", "message", "post", "calendar_event"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
