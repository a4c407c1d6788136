"""Notification Message Formatting — pure functions for inbox message text.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - Amounts render without trailing zeros ("100", "11.98")
"""

from decimal import Decimal

from creditmart.core.domain_types import OrderStatus, OrderType


def format_amount(amount: Decimal | int) -> str:
    value = Decimal(amount)
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return str(value.normalize())


def purchase_placed(username: str, quantity: int, product_name: str, cost: Decimal) -> str:
    return (
        f"New order: {username} purchased {quantity}x {product_name} "
        f"for {format_amount(cost)} credits"
    )


def top_up_requested(username: str, amount: Decimal, payment_method: str) -> str:
    return (
        f"New credit purchase: {username} wants to buy "
        f"{format_amount(amount)} credits via {payment_method}"
    )


def status_changed(order_id: int, order_type: OrderType, new_status: OrderStatus, amount: Decimal) -> str:
    """Message to the order owner after an admin transition."""
    if order_type == OrderType.CREDIT and new_status == OrderStatus.APPROVED:
        return f"Your credit purchase of {format_amount(amount)} credits has been approved!"
    if new_status == OrderStatus.REJECTED:
        return (
            f"Your order #{order_id} has been rejected. "
            "Please contact admin for details."
        )
    if new_status == OrderStatus.COMPLETED:
        return f"Your order #{order_id} has been completed."
    return f"Your order #{order_id} is now {new_status.value}."
