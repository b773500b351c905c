"""
Infrastructure layer: query interfaces over the data owned by the CRUD layer.
"""
from .repository import InMemoryLedgerRepository, LedgerQueries

__all__ = [
    "LedgerQueries",
    "InMemoryLedgerRepository",
]
