"""
Input models for request validation using Pydantic.
"""

from typing import Annotated, List

from pydantic import BaseModel, Field

from pos_service.models.parked_order import OrderItem


class ParkOrderRequest(BaseModel):
    """Request model for parking an order."""

    name: Annotated[str, Field(
        min_length=1,
        description='Label for the parked order',
        examples=['Table 5']
    )]

    items: Annotated[List[OrderItem], Field(
        min_length=1,
        description='Cart contents to park'
    )]
