"""
Business Logic Layer for parked orders.

Deletion reports its outcome as a ``DeleteOutcome`` value rather than an
exception: "not found" is an expected answer for a client retrying a delete,
and the HTTP layer maps each outcome to its own status code.
"""

from enum import Enum
from typing import Any, Optional

from pos_service.dal import DalHandler
from pos_service.handlers.utils.errors import ErrorContext, ValidationError
from pos_service.handlers.utils.observability import add_count_metric, logger, tracer
from pos_service.models.input import ParkOrderRequest
from pos_service.models.parked_order import ParkedOrder

INVALID_ID_MESSAGE = 'Invalid parked order ID'


class DeleteOutcome(str, Enum):
    """Result of a delete-by-id."""

    DELETED = 'DELETED'
    NOT_FOUND = 'NOT_FOUND'


def parse_parked_order_id(raw_id: Any, context: Optional[ErrorContext] = None) -> str:
    """
    Validate a parked order id taken from the request path.

    Args:
        raw_id: Value resolved for the ``id`` path parameter
        context: Error context for tracing

    Returns:
        The id, unchanged

    Raises:
        ValidationError: If the id is missing, empty, or not a single string
    """
    if not isinstance(raw_id, str) or not raw_id.strip():
        raise ValidationError(message=INVALID_ID_MESSAGE, context=context)
    return raw_id


class ParkedOrderService:
    """Business logic service for parked orders."""

    def __init__(self, dal_handler: DalHandler):
        self.dal = dal_handler

    @tracer.capture_method
    def delete_parked_order(self, order_id: str) -> DeleteOutcome:
        """
        Delete a parked order by id.

        Args:
            order_id: Validated parked order id

        Returns:
            DELETED when at least one row was removed, NOT_FOUND otherwise
        """
        deleted = self.dal.delete_parked_order_by_id(order_id)

        if deleted == 0:
            logger.info("Parked order not found", extra={"order_id": order_id})
            add_count_metric("ParkedOrderNotFound")
            return DeleteOutcome.NOT_FOUND

        if deleted > 1:
            logger.warning("Delete removed more than one parked order", extra={
                "order_id": order_id,
                "rows_deleted": deleted,
            })

        add_count_metric("ParkedOrderDeleted")
        logger.info("Parked order deleted", extra={"order_id": order_id})
        return DeleteOutcome.DELETED

    @tracer.capture_method
    def park_order(self, request: ParkOrderRequest) -> ParkedOrder:
        """
        Park a cart for later completion.

        Args:
            request: Validated park order request

        Returns:
            The stored parked order
        """
        order = ParkedOrder.create(name=request.name, items=request.items)
        stored = self.dal.create_parked_order(order)

        add_count_metric("ParkedOrderCreated")
        tracer.put_annotation("parked_order_id", stored.id)
        return stored
