"""
POS API service package.

Serverless endpoints of the point-of-sale backend, split into layers:

- handlers: API Gateway entry points, routing and HTTP mapping
- logic: session and parked order operations
- dal: SQL access, schema creation and seed data
- models: request, response and domain models
"""

__version__ = "1.0.0"
__description__ = "Serverless POS endpoints on AWS Lambda"

from pos_service.models.parked_order import OrderItem, ParkedOrder
from pos_service.models.input import ParkOrderRequest
from pos_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "OrderItem",
    "ParkedOrder",
    "ParkOrderRequest",
    "logger",
    "tracer",
    "metrics",
]
