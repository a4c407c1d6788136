"""Product Routes — public catalog, purchases and admin catalog edits.

Invariants:
    - Listing and detail are public; purchase needs a caller; edits need admin
    - Admin edits run inside atomic() on the request session
    - Stock changes go through CatalogStore.adjust_stock only
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.api.dependencies import get_actor, get_admin, get_workflow
from creditmart.core.authorization import Actor
from creditmart.core.domain_types import ProductId
from creditmart.infrastructure.database import atomic, get_db
from creditmart.schemas.orders import PurchaseRequest, PurchaseResponse
from creditmart.schemas.products import (
    ProductCreate, ProductUpdate, ProductView, StockAdjustment,
)
from creditmart.services.catalog_store import SqlCatalogStore, serialize_product
from creditmart.services.order_workflow import OrderWorkflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("")
async def list_products(db: AsyncSession = Depends(get_db)):
    """Active products grouped by category and subcategory."""
    return await SqlCatalogStore(db).list_products()


@router.get("/{product_id}", response_model=ProductView)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await SqlCatalogStore(db).get_product(ProductId(product_id))
    return serialize_product(product)


@router.post(
    "", response_model=ProductView, status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate,
    admin: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        product = await SqlCatalogStore(db).create_product(**body.model_dump())
    return serialize_product(product)


@router.patch("/{product_id}", response_model=ProductView)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    admin: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db),
):
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    async with atomic(db):
        product = await SqlCatalogStore(db).update_product(
            ProductId(product_id), fields,
        )
    logger.info(
        f"Product {product_id} updated: {sorted(fields)}",
        extra={"product_id": product_id, "user_id": admin.user_id},
    )
    return serialize_product(product)


@router.post("/{product_id}/stock", response_model=ProductView)
async def adjust_stock(
    product_id: int,
    body: StockAdjustment,
    admin: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db),
):
    """Restock or write off units; stock never drops below zero."""
    store = SqlCatalogStore(db)
    async with atomic(db):
        await store.adjust_stock(ProductId(product_id), body.delta)
        product = await store.get_product(ProductId(product_id))
    return serialize_product(product)


@router.post("/{product_id}/purchase", response_model=PurchaseResponse)
async def purchase_product(
    product_id: int,
    body: PurchaseRequest,
    actor: Actor = Depends(get_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
):
    """Buy with credits; stock and balance settle immediately."""
    receipt = await workflow.submit_purchase(
        actor, ProductId(product_id), body.quantity,
    )
    return PurchaseResponse(
        order_id=receipt.order_id,
        remaining_credits=receipt.remaining_credits,
    )
