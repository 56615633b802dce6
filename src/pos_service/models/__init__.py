"""
Service Models Package

Pydantic models used throughout the POS service: request validation models,
response bodies and the parked order domain model.
"""

from .input import ParkOrderRequest
from .output import ErrorOutput, MessageOutput, SuccessOutput
from .parked_order import OrderItem, ParkedOrder, SellBy

__all__ = [
    # Input models
    "ParkOrderRequest",

    # Output models
    "ErrorOutput",
    "MessageOutput",
    "SuccessOutput",

    # Domain models
    "OrderItem",
    "ParkedOrder",
    "SellBy",
]
