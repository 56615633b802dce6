"""
AWS Lambda handlers for the POS API.

Each module owns one API Gateway REST resolver and exposes a
``lambda_handler`` entry point:

- auth_handler: POST /auth/logout
- init_db_handler: /init-db (any method)
- parked_orders_handler: POST /parked-orders, DELETE /parked-orders/{id}

Shared plumbing lives in ``handlers.utils`` (observability, errors,
responses, cookies, resolver factory) and ``handlers.models`` (environment
configuration).
"""

__version__ = "1.0.0"

from pos_service.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
