"""
Link store module.
Implements Strategy Pattern for pluggable key-value backends.
"""

from .strategies import LinkStore, InMemoryLinkStore, RedisLinkStore, SQLLinkStore
from .factory import StoreFactory, StoreBackend

__all__ = [
    "LinkStore",
    "InMemoryLinkStore",
    "RedisLinkStore",
    "SQLLinkStore",
    "StoreFactory",
    "StoreBackend",
]
