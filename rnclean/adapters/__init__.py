"""Adapters — tool bindings for external commands and the filesystem.

Public re-exports for convenient access.
"""

from rnclean.adapters.base import Adapter, ExecutionContext
from rnclean.adapters.mock import MockAdapter
from rnclean.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
