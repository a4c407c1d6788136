"""Settings Routes — payment details and admin contact."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.api.dependencies import get_admin
from creditmart.config import get_settings
from creditmart.core.authorization import Actor
from creditmart.infrastructure.database import atomic, get_db
from creditmart.schemas.settings import AdminContactUpdate, PaymentDetailsUpdate
from creditmart.services import app_settings

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("/payment-details")
async def get_payment_details(db: AsyncSession = Depends(get_db)):
    return await app_settings.get_payment_details(db)


@router.put("/payment-details")
async def put_payment_details(
    body: PaymentDetailsUpdate,
    admin: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db),
):
    details = {
        method: account.model_dump()
        for method, account in body.payment_details.items()
    }
    async with atomic(db):
        await app_settings.replace_payment_details(db, details)
    return {"payment_details": details}


@router.get("/admin-contact")
async def get_admin_contact(db: AsyncSession = Depends(get_db)):
    contact = await app_settings.get_admin_contact(
        db, get_settings().default_admin_contact,
    )
    return {"admin_contact": contact}


@router.put("/admin-contact")
async def put_admin_contact(
    body: AdminContactUpdate,
    admin: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db),
):
    async with atomic(db):
        await app_settings.put_setting(
            db, app_settings.ADMIN_CONTACT_KEY, body.admin_contact,
        )
    return {"admin_contact": body.admin_contact}
