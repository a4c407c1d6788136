"""Order Workflow — purchases, top-ups and admin status transitions.

Invariants:
    - Each operation is ONE transaction (atomic): validate, mutate ledger/catalog,
      insert or update the order, commit. Any failure rolls back all of it.
    - Product purchases settle stock and balance at creation; later status
      changes never touch either
    - A credit order credits the balance once, on pending -> approved; the status
      change is a compare-and-set so a concurrent second approval loses
    - Notifications are dispatched AFTER commit and their failures are logged
      and swallowed

Design Decisions:
    - Session, ledger, catalog and sink injected by the caller (api/dependencies.py)
    - Pure checks from core/ run first as a snapshot; the conditional UPDATEs in
      the ledger and catalog are the authoritative guard under concurrency
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.core.authorization import Actor, require_admin
from creditmart.core.domain_types import (
    CREDITS_PAYMENT_METHOD, OrderId, OrderScope, OrderStatus, OrderType,
    ProductId, UserId,
)
from creditmart.core.enforce_orders import (
    check_credits, check_product_active, check_quantity, check_stock,
    normalize_payment_method, normalize_top_up_amount, purchase_cost,
    purchase_debit,
)
from creditmart.core.enforce_transitions import (
    check_transition, credit_delta_for, parse_status,
)
from creditmart.core.errors import (
    ErrorContext, InvalidTransitionError, ResourceNotFoundError,
)
from creditmart.core import format_messages
from creditmart.core.repository_protocols import (
    CatalogStore, CreditLedger, NotificationSink,
)
from creditmart.infrastructure.database import atomic
from creditmart.models.order import Order
from creditmart.models.product import Product
from creditmart.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseReceipt:
    order_id: OrderId
    remaining_credits: int


@dataclass(frozen=True)
class TopUpReceipt:
    order_id: OrderId
    status: OrderStatus = OrderStatus.PENDING


@dataclass(frozen=True)
class StatusChange:
    order_id: OrderId
    status: OrderStatus


class OrderWorkflow:
    """The order/credit transaction engine."""

    def __init__(
        self,
        db: AsyncSession,
        ledger: CreditLedger,
        catalog: CatalogStore,
        notifier: NotificationSink,
        admin_user_id: int,
    ):
        self._db = db
        self._ledger = ledger
        self._catalog = catalog
        self._notifier = notifier
        self._admin_user_id = UserId(admin_user_id)

    # ─── Purchases ───────────────────────────────────────────────

    async def submit_purchase(
        self, actor: Actor, product_id: ProductId, quantity: int,
    ) -> PurchaseReceipt:
        """Buy quantity units of a product with credits."""
        ctx = ErrorContext(user_id=actor.user_id, product_id=product_id)
        check_quantity(quantity, ctx)

        async with atomic(self._db):
            product = await self._catalog.get_product(product_id)
            check_product_active(product_id, product.active, ctx)
            check_stock(product.stock, quantity, ctx)

            cost = purchase_cost(product.price, quantity)
            debit = purchase_debit(cost)
            account = await self._ledger.get_account(actor.user_id)
            check_credits(account.balance, debit, ctx)

            await self._catalog.adjust_stock(product_id, -quantity)
            remaining = await self._ledger.adjust_balance(actor.user_id, -debit)

            order = Order(
                user_id=actor.user_id,
                product_id=product_id,
                type=OrderType.PRODUCT.value,
                amount=cost,
                quantity=quantity,
                status=OrderStatus.PENDING.value,
                payment_method=CREDITS_PAYMENT_METHOD,
            )
            self._db.add(order)
            await self._db.flush()
            order_id = OrderId(order.id)
            username, product_name = account.username, product.name

        logger.info(
            f"Purchase committed: {quantity}x product {product_id} for {cost}",
            extra={"user_id": actor.user_id, "order_id": order_id, "product_id": product_id},
        )
        await self._dispatch(
            self._admin_user_id,
            format_messages.purchase_placed(username, quantity, product_name, cost),
        )
        return PurchaseReceipt(order_id=order_id, remaining_credits=remaining)

    # ─── Top-ups ─────────────────────────────────────────────────

    async def submit_top_up(
        self,
        actor: Actor,
        amount: Decimal | int | str,
        payment_method: str,
        payment_reference: str | None = None,
    ) -> TopUpReceipt:
        """Record a pending request for credits; no balance change yet."""
        ctx = ErrorContext(user_id=actor.user_id)
        value = normalize_top_up_amount(amount, ctx)
        method = normalize_payment_method(payment_method, ctx)

        async with atomic(self._db):
            account = await self._ledger.get_account(actor.user_id)
            order = Order(
                user_id=actor.user_id,
                product_id=None,
                type=OrderType.CREDIT.value,
                amount=value,
                quantity=1,
                status=OrderStatus.PENDING.value,
                payment_method=method,
                payment_reference=payment_reference,
            )
            self._db.add(order)
            await self._db.flush()
            order_id = OrderId(order.id)
            username = account.username

        logger.info(
            f"Top-up requested: {value} credits via {method}",
            extra={"user_id": actor.user_id, "order_id": order_id},
        )
        await self._dispatch(
            self._admin_user_id,
            format_messages.top_up_requested(username, value, method),
        )
        return TopUpReceipt(order_id=order_id)

    # ─── Status transitions ──────────────────────────────────────

    async def set_status(
        self, actor: Actor, order_id: OrderId, new_status: OrderStatus,
    ) -> StatusChange:
        """Admin moves an order along one edge of the status machine."""
        require_admin(actor)
        ctx = ErrorContext(user_id=actor.user_id, order_id=order_id)
        new_status = parse_status(new_status, ctx)

        async with atomic(self._db):
            order = await self._get_order(order_id, ctx)
            current = OrderStatus(order.status)
            check_transition(current, new_status, ctx)

            if not await self._compare_and_set_status(order_id, current, new_status):
                latest = await self._get_order(order_id, ctx)
                raise InvalidTransitionError(latest.status, new_status.value, ctx)

            order_type = OrderType(order.type)
            delta = credit_delta_for(order_type, current, new_status, order.amount)
            if delta:
                await self._ledger.adjust_balance(UserId(order.user_id), delta)
            owner_id, amount = UserId(order.user_id), order.amount

        logger.info(
            f"Order {order_id} moved {current.value} -> {new_status.value}",
            extra={
                "user_id": owner_id, "order_id": order_id,
                "status": new_status.value,
            },
        )
        await self._dispatch(
            owner_id,
            format_messages.status_changed(order_id, order_type, new_status, amount),
        )
        return StatusChange(order_id=order_id, status=new_status)

    # ─── Read projections ────────────────────────────────────────

    async def list_orders(
        self, actor: Actor, scope: OrderScope = OrderScope.MINE,
    ) -> list[dict]:
        """Orders newest first; scope=all is admin only. No side effects."""
        scope = OrderScope(scope)
        if scope == OrderScope.ALL:
            require_admin(actor)

        query = (
            select(Order, Product.name, User.username)
            .join(User, User.id == Order.user_id)
            .outerjoin(Product, Product.id == Order.product_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .execution_options(populate_existing=True)
        )
        if scope == OrderScope.MINE:
            query = query.where(Order.user_id == actor.user_id)

        result = await self._db.execute(query)
        return [
            serialize_order(order, product_name, username)
            for order, product_name, username in result.all()
        ]

    # ─── Helpers ─────────────────────────────────────────────────

    async def _get_order(self, order_id: OrderId, ctx: ErrorContext) -> Order:
        result = await self._db.execute(
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True),
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise ResourceNotFoundError("Order", order_id, ctx)
        return order

    async def _compare_and_set_status(
        self, order_id: OrderId, current: OrderStatus, new: OrderStatus,
    ) -> bool:
        result = await self._db.execute(
            update(Order)
            .where(Order.id == order_id)
            .where(Order.status == current.value)
            .values(status=new.value, updated_at=datetime.now(timezone.utc))
            .returning(Order.id)
            .execution_options(synchronize_session=False),
        )
        return result.scalar_one_or_none() is not None

    async def _dispatch(self, user_id: UserId, message: str) -> None:
        """Best-effort delivery; never raises."""
        try:
            await self._notifier.notify(user_id, message)
        except Exception as e:
            logger.warning(
                f"Notification to user {user_id} failed: {e}",
                extra={"user_id": user_id},
            )


def serialize_order(order: Order, product_name: str | None, username: str | None) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "username": username,
        "product_id": order.product_id,
        "product_name": product_name,
        "type": order.type,
        "amount": order.amount,
        "quantity": order.quantity,
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_reference": order.payment_reference,
        "created_at": order.created_at.isoformat(),
        "updated_at": order.updated_at.isoformat(),
    }
