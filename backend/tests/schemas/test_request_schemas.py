"""Request schemas — boundary shape validation.

Business rules (quantity >= 1, amount > 0) are NOT enforced here, so the
domain error codes reach the client; these tests pin that split.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from creditmart.core.domain_types import OrderStatus
from creditmart.schemas.orders import PurchaseRequest, StatusUpdate, TopUpRequest
from creditmart.schemas.products import ProductCreate, ProductUpdate
from creditmart.schemas.settings import PaymentDetailsUpdate
from creditmart.schemas.users import BroadcastRequest, UserFlagsUpdate


def test_purchase_request_accepts_zero_for_domain_check():
    assert PurchaseRequest(quantity=0).quantity == 0


def test_top_up_amount_parsed_as_decimal():
    req = TopUpRequest(amount="100", payment_method="bkash")
    assert req.amount == Decimal("100")
    assert req.payment_reference is None


def test_top_up_payment_method_length_capped():
    with pytest.raises(ValidationError):
        TopUpRequest(amount=10, payment_method="x" * 51)


def test_status_update_rejects_unknown_status():
    with pytest.raises(ValidationError):
        StatusUpdate(status="shipped")


def test_status_update_parses_enum():
    assert StatusUpdate(status="approved").status is OrderStatus.APPROVED


def test_product_create_strips_name():
    body = ProductCreate(name="  Gift Card ", price="5.00", category="cards")
    assert body.name == "Gift Card"
    assert body.stock == 0


def test_product_create_rejects_whitespace_category():
    with pytest.raises(ValidationError):
        ProductCreate(name="x", price="1", category="   ")


def test_product_create_rejects_negative_price():
    with pytest.raises(ValidationError):
        ProductCreate(name="x", price="-1", category="c")


def test_product_update_has_no_stock_field():
    body = ProductUpdate(stock=5, price="2.00")
    assert body.model_dump(exclude_unset=True) == {"price": Decimal("2.00")}


def test_user_flags_ignore_balance():
    body = UserFlagsUpdate(banned=True, balance=1000)
    assert body.model_dump(exclude_unset=True) == {"banned": True}


def test_broadcast_message_stripped():
    assert BroadcastRequest(message=" hi ", target_ids=[1]).message == "hi"


def test_broadcast_rejects_blank_message():
    with pytest.raises(ValidationError):
        BroadcastRequest(message="   ", target_ids=[1])


def test_payment_details_shape():
    body = PaymentDetailsUpdate(
        payment_details={"bkash": {"name": "Shop", "number": "0170"}},
    )
    assert body.payment_details["bkash"].number == "0170"
