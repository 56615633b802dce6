"""
Parked order domain model.

A parked order is a cart the cashier set aside (for example "Table 5") to be
recalled and completed later.
"""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SellBy(str, Enum):
    """How a product quantity is measured."""

    UNIT = 'unit'
    WEIGHT = 'weight'


class OrderItem(BaseModel):
    """A product snapshot plus the quantity put in the cart."""

    # Product attributes not modelled here are kept as-is
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    id: Annotated[int, Field(
        description='Product identifier',
        examples=[1]
    )]

    name: Annotated[str, Field(
        min_length=1,
        description='Product name',
        examples=['Espresso']
    )]

    price: Annotated[Dict[str, float], Field(
        default_factory=dict,
        description='Unit price per currency code',
        examples=[{'USD': 2.5, 'MXN': 45.0}]
    )]

    category: Annotated[Optional[str], Field(
        default=None,
        description='Product category'
    )] = None

    sell_by: Annotated[SellBy, Field(
        default=SellBy.UNIT,
        alias='sellBy',
        description='Whether quantity counts units or kilograms'
    )] = SellBy.UNIT

    quantity: Annotated[float, Field(
        gt=0,
        description='Number of units, or weight in kg',
        examples=[2, 0.5]
    )]


class ParkedOrder(BaseModel):
    """Core parked order domain model."""

    model_config = ConfigDict(populate_by_name=True)

    id: Annotated[str, Field(
        description='Unique identifier for the parked order',
        examples=['parked-1678886400000']
    )]

    name: Annotated[str, Field(
        min_length=1,
        description='Label the cashier gave the order',
        examples=['Table 5']
    )]

    items: Annotated[List[OrderItem], Field(
        min_length=1,
        description='Items in the parked cart'
    )]

    parked_at: Annotated[str, Field(
        alias='parkedAt',
        description='ISO timestamp when the order was parked'
    )]

    @classmethod
    def create(cls, name: str, items: List[OrderItem]) -> 'ParkedOrder':
        """
        Create a new parked order stamped with the current time.

        Ids follow the ``parked-<epoch milliseconds>`` convention clients use.
        """
        return cls(
            id=f"parked-{time.time_ns() // 1_000_000}",
            name=name,
            items=items,
            parked_at=datetime.now(timezone.utc).isoformat(),
        )
