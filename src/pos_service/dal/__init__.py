"""
Data Access Layer (DAL) for the POS service.

Interfaces and the process-wide factory for the relational store. Handlers
obtain the store through ``get_dal_handler()`` so a warm Lambda container
reuses one SQLAlchemy engine across invocations.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from pos_service.models.parked_order import ParkedOrder


@runtime_checkable
class DalHandler(Protocol):
    """Protocol defining the data access layer interface."""

    dialect_name: str

    def execute(self, statement: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Execute one SQL statement and return the affected row count."""
        ...

    def delete_session_by_id(self, session_id: str) -> int:
        """Delete a session row, returning the number of rows removed."""
        ...

    def delete_parked_order_by_id(self, order_id: str) -> int:
        """Delete a parked order, returning the number of rows removed."""
        ...

    def create_parked_order(self, order: ParkedOrder) -> ParkedOrder:
        """Persist a new parked order."""
        ...


class BaseDalHandler(ABC):
    """Abstract base class for data access layer implementations."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """SQL dialect of the store, e.g. ``postgresql`` or ``sqlite``."""
        pass

    @abstractmethod
    def execute(self, statement: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Execute one SQL statement and return the affected row count."""
        pass

    @abstractmethod
    def delete_session_by_id(self, session_id: str) -> int:
        """Delete a session row, returning the number of rows removed."""
        pass

    @abstractmethod
    def delete_parked_order_by_id(self, order_id: str) -> int:
        """Delete a parked order, returning the number of rows removed."""
        pass

    @abstractmethod
    def create_parked_order(self, order: ParkedOrder) -> ParkedOrder:
        """Persist a new parked order."""
        pass


_dal_handler: Optional[DalHandler] = None


def get_dal_handler() -> DalHandler:
    """
    Get or create the process-wide DAL handler.

    The handler is built from the ``DATABASE_URL`` environment variable on
    first use and reused by later invocations in the same container.
    """
    global _dal_handler

    if _dal_handler is None:
        # Import here to avoid circular imports
        from pos_service.dal.db_handler import SqlHandler, create_db_engine

        _dal_handler = SqlHandler(create_db_engine())

    return _dal_handler


def set_dal_handler(handler: Optional[DalHandler]) -> None:
    """Replace the process-wide DAL handler (None forces a rebuild on next use)."""
    global _dal_handler
    _dal_handler = handler


__all__ = [
    'DalHandler',
    'BaseDalHandler',
    'get_dal_handler',
    'set_dal_handler',
]
