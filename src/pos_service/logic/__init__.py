"""
Business logic layer for the POS service.

Services here sit between the route handlers and the data access layer:
they take validated input, call the DAL and report outcomes the handlers
turn into HTTP responses.
"""

from pos_service.logic.parked_order_service import DeleteOutcome, ParkedOrderService, parse_parked_order_id
from pos_service.logic.session_service import SessionService

__all__ = [
    "DeleteOutcome",
    "ParkedOrderService",
    "SessionService",
    "parse_parked_order_id",
]
