"""Boundary Protocols — contracts between the order engine and its stores.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every balance write goes through CreditLedger.adjust_balance
    - Every stock write goes through CatalogStore.adjust_stock
    - NotificationSink is called after commit; its failures never reach the
      caller's transaction

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the pure checks they call are sync
"""

from decimal import Decimal
from typing import Iterable, Protocol

from creditmart.core.domain_types import ProductId, UserId


class AccountLike(Protocol):
    """Structural contract for user rows handed to the workflow."""
    id: int
    username: str
    balance: int


class ProductLike(Protocol):
    """Structural contract for product rows handed to the workflow."""
    id: int
    name: str
    price: Decimal
    stock: int
    active: bool


class CreditLedger(Protocol):
    """Authoritative user balances."""
    async def get_account(self, user_id: UserId) -> AccountLike: ...
    async def get_balance(self, user_id: UserId) -> int: ...
    async def adjust_balance(self, user_id: UserId, delta: int) -> int: ...


class CatalogStore(Protocol):
    """Authoritative product price and stock."""
    async def get_product(self, product_id: ProductId) -> ProductLike: ...
    async def adjust_stock(self, product_id: ProductId, delta: int) -> int: ...


class NotificationSink(Protocol):
    """Best-effort, durable user inbox delivery."""
    async def notify(self, user_id: UserId, message: str) -> None: ...
    async def broadcast(self, user_ids: Iterable[UserId], message: str) -> int: ...
