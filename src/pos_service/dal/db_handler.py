"""
SQL implementation of the Data Access Layer (DAL).

Statements are issued through SQLAlchemy Core against PostgreSQL in
production and SQLite in tests. Each call runs in its own short transaction
and driver failures surface as ``StoreError``.
"""

import json
from typing import Any, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pos_service.dal import BaseDalHandler
from pos_service.handlers.models.env_vars import get_handler_env_vars
from pos_service.handlers.utils.errors import StoreError
from pos_service.handlers.utils.observability import logger, tracer
from pos_service.models.parked_order import ParkedOrder


def create_db_engine() -> Engine:
    """
    Create the SQLAlchemy engine described by the handler environment.

    Returns:
        Engine bound to ``DATABASE_URL``
    """
    env_vars = get_handler_env_vars()
    connect_args = {}
    if env_vars.DATABASE_URL.startswith("postgresql"):
        connect_args["connect_timeout"] = env_vars.DB_CONNECTION_TIMEOUT

    engine = create_engine(
        env_vars.DATABASE_URL,
        echo=env_vars.echo_sql,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def describe_store_error(error: SQLAlchemyError) -> str:
    """Driver-level message of a SQLAlchemy error, without the SQL echo."""
    original = getattr(error, "orig", None)
    return str(original) if original is not None else str(error)


class SqlHandler(BaseDalHandler):
    """SQLAlchemy implementation of the data access layer."""

    def __init__(self, engine: Engine) -> None:
        """
        Initialize the SQL handler.

        Args:
            engine: SQLAlchemy engine connected to the POS store
        """
        self.engine = engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @tracer.capture_method
    def execute(self, statement: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """
        Execute a single statement in its own transaction.

        Args:
            statement: SQL text, with ``:name`` placeholders for ``params``
            params: Bound parameter values

        Returns:
            Number of rows affected (-1 when the driver does not report it)

        Raises:
            StoreError: If the store rejects the statement or is unreachable
        """
        try:
            with self.engine.begin() as connection:
                result = connection.execute(text(statement), dict(params or {}))
                return result.rowcount
        except SQLAlchemyError as e:
            message = describe_store_error(e)
            logger.error("SQL statement failed", extra={
                "error": message,
                "statement": statement.strip().splitlines()[0] if statement.strip() else "",
            })
            raise StoreError(message=message, operation="execute") from e

    @tracer.capture_method
    def delete_session_by_id(self, session_id: str) -> int:
        """
        Delete the session identified by ``session_id``.

        Returns:
            Number of session rows removed (0 when the id is unknown)
        """
        deleted = self.execute(
            "DELETE FROM auth_sessions WHERE id = :session_id",
            {"session_id": session_id},
        )
        logger.debug("Session delete executed", extra={"rows_deleted": deleted})
        return deleted

    @tracer.capture_method
    def delete_parked_order_by_id(self, order_id: str) -> int:
        """
        Delete the parked order identified by ``order_id``.

        Returns:
            Number of parked order rows removed (0 when the id is unknown)
        """
        deleted = self.execute(
            "DELETE FROM parked_orders WHERE id = :order_id",
            {"order_id": order_id},
        )
        tracer.put_annotation("parked_order_id", order_id)
        logger.debug("Parked order delete executed", extra={
            "order_id": order_id,
            "rows_deleted": deleted,
        })
        return deleted

    @tracer.capture_method
    def create_parked_order(self, order: ParkedOrder) -> ParkedOrder:
        """
        Insert a parked order row.

        Raises:
            StoreError: If the insert fails, e.g. on a duplicate id
        """
        items = [item.model_dump(mode="json", by_alias=True) for item in order.items]
        self.execute(
            'INSERT INTO parked_orders (id, name, items, "parkedAt") '
            'VALUES (:id, :name, :items, :parked_at)',
            {
                "id": order.id,
                "name": order.name,
                "items": json.dumps(items),
                "parked_at": order.parked_at,
            },
        )
        logger.info("Parked order stored", extra={"order_id": order.id, "item_count": len(items)})
        return order
