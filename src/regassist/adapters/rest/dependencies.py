"""
Shared FastAPI dependencies.

- get_factory(): returns the ServiceFactory set at startup.
"""

from __future__ import annotations

from regassist.factory import ServiceFactory

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory | None) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory
