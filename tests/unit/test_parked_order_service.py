"""
Unit tests for the parked order service.
"""

from unittest.mock import Mock

import pytest

from pos_service.handlers.utils.errors import ValidationError
from pos_service.logic.parked_order_service import (
    INVALID_ID_MESSAGE,
    DeleteOutcome,
    ParkedOrderService,
    parse_parked_order_id,
)
from pos_service.models.input import ParkOrderRequest


@pytest.fixture
def mock_dal():
    return Mock()


class TestParseParkedOrderId:
    """Test cases for parked order id validation."""

    def test_valid_id_returned_unchanged(self):
        assert parse_parked_order_id("parked-1678886400000") == "parked-1678886400000"

    @pytest.mark.parametrize("raw_id", [None, "", "   ", ["parked-1", "parked-2"], 42])
    def test_invalid_ids_rejected(self, raw_id):
        with pytest.raises(ValidationError, match=INVALID_ID_MESSAGE):
            parse_parked_order_id(raw_id)


class TestDeleteParkedOrder:
    """Test cases for ParkedOrderService.delete_parked_order."""

    @pytest.mark.parametrize("rows_deleted, expected", [
        (1, DeleteOutcome.DELETED),
        (2, DeleteOutcome.DELETED),
        (0, DeleteOutcome.NOT_FOUND),
    ])
    def test_outcome_follows_row_count(self, mock_dal, rows_deleted, expected):
        mock_dal.delete_parked_order_by_id.return_value = rows_deleted

        assert ParkedOrderService(mock_dal).delete_parked_order("parked-1") is expected
        mock_dal.delete_parked_order_by_id.assert_called_once_with("parked-1")


class TestParkOrder:
    """Test cases for ParkedOrderService.park_order."""

    def test_stores_new_order(self, mock_dal, sample_items):
        mock_dal.create_parked_order.side_effect = lambda order: order
        request = ParkOrderRequest.model_validate({"name": "Table 5", "items": sample_items})

        order = ParkedOrderService(mock_dal).park_order(request)

        assert order.id.startswith("parked-")
        assert order.name == "Table 5"
        mock_dal.create_parked_order.assert_called_once_with(order)
