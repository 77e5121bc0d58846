"""
Adapters package for the Authorization Service.

Contains the persistence collaborator behind the secured operations. Keep
adapters free of authorization logic; enforcement happens in app.domain.
"""

from .repository import InMemoryRepository, Record

__all__ = [
    "InMemoryRepository",
    "Record",
]
