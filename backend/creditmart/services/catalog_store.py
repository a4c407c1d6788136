"""Catalog Store — authoritative product price, stock and listing.

Invariants:
    - adjust_stock is the ONLY writer of products.stock
    - The check and the write are one conditional UPDATE: stock never goes
      below zero, even under concurrent purchases, nor above INT_COLUMN_MAX
    - The store never commits; callers own the transaction
    - Listings show active products only, grouped category -> subcategory

Design Decisions:
    - Same compare-and-set shape as SqlCreditLedger.adjust_balance
    - Products without subcategory are grouped under "default"
"""

import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.core.domain_types import INT_COLUMN_MAX, ProductId
from creditmart.core.errors import (
    CapacityExceededError, ErrorContext, InputValidationError,
    InsufficientStockError, ResourceNotFoundError,
)
from creditmart.models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_SUBCATEGORY = "default"

# Fields an admin may change through update_product (stock goes through adjust_stock)
EDITABLE_FIELDS = frozenset({
    "name", "price", "category", "subcategory", "description",
    "image_url", "active",
})


class SqlCatalogStore:
    """CatalogStore backed by the products table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_product(self, product_id: ProductId) -> Product:
        result = await self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True),
        )
        product = result.scalar_one_or_none()
        if product is None:
            raise ResourceNotFoundError(
                "Product", product_id, ErrorContext(product_id=product_id),
            )
        return product

    async def adjust_stock(self, product_id: ProductId, delta: int) -> int:
        """Add delta (may be negative) to the stock; return the new stock."""
        ctx = ErrorContext(product_id=product_id)
        if delta > INT_COLUMN_MAX:
            raise CapacityExceededError("Stock", delta, context=ctx)
        if delta < -INT_COLUMN_MAX:
            product = await self.get_product(product_id)
            raise InsufficientStockError(-delta, product.stock, ctx)
        stmt = update(Product).where(Product.id == product_id)
        if delta < 0:
            stmt = stmt.where(Product.stock >= -delta)
        else:
            stmt = stmt.where(Product.stock <= INT_COLUMN_MAX - delta)
        result = await self.db.execute(
            stmt
            .values(stock=Product.stock + delta)
            .returning(Product.stock)
            .execution_options(synchronize_session=False),
        )
        new_stock = result.scalar_one_or_none()
        if new_stock is None:
            product = await self.get_product(product_id)
            if delta > 0:
                raise CapacityExceededError("Stock", delta, product.stock, ctx)
            raise InsufficientStockError(-delta, product.stock, ctx)
        logger.debug(
            f"Stock of product {product_id} adjusted by {delta} to {new_stock}",
            extra={"product_id": product_id, "delta": delta},
        )
        return new_stock

    async def list_products(self) -> dict[str, dict[str, list[dict]]]:
        """Active products grouped by category, then subcategory."""
        result = await self.db.execute(
            select(Product)
            .where(Product.active.is_(True))
            .order_by(Product.category, Product.name)
            .execution_options(populate_existing=True),
        )
        return group_products(result.scalars().all())

    async def create_product(
        self,
        *,
        name: str,
        price: Decimal,
        category: str,
        stock: int = 0,
        subcategory: str | None = None,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Product:
        product = Product(
            name=name, price=price, category=category, stock=stock,
            subcategory=subcategory, description=description,
            image_url=image_url, active=True,
        )
        self.db.add(product)
        await self.db.flush()
        logger.info(
            f"Product '{name}' created",
            extra={"product_id": product.id},
        )
        return product

    async def update_product(self, product_id: ProductId, fields: dict) -> Product:
        """Apply admin edits to price/active/descriptive fields."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise InputValidationError(
                f"Not editable: {', '.join(sorted(unknown))}",
                sorted(unknown)[0], ErrorContext(product_id=product_id),
            )
        product = await self.get_product(product_id)
        for key, value in fields.items():
            setattr(product, key, value)
        await self.db.flush()
        return product


def serialize_product(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "category": product.category,
        "subcategory": product.subcategory,
        "description": product.description,
        "image_url": product.image_url,
        "stock": product.stock,
        "active": product.active,
    }


def group_products(products) -> dict[str, dict[str, list[dict]]]:
    grouped: dict[str, dict[str, list[dict]]] = {}
    for p in products:
        bucket = grouped.setdefault(p.category, {}).setdefault(
            p.subcategory or DEFAULT_SUBCATEGORY, [],
        )
        bucket.append({
            "id": p.id,
            "name": p.name,
            "price": p.price,
            "description": p.description,
            "stock": p.stock,
            "image_url": p.image_url,
        })
    return grouped
