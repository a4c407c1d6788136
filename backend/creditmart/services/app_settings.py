"""App Settings — payment details and admin contact shown to buyers.

Invariants:
    - replace_payment_details swaps the whole set in the caller's transaction
    - get_admin_contact falls back to the configured default when unset
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.models.app_setting import AppSetting
from creditmart.models.payment_detail import PaymentDetail

ADMIN_CONTACT_KEY = "admin_contact"


async def get_payment_details(db: AsyncSession) -> dict[str, dict[str, str]]:
    result = await db.execute(select(PaymentDetail).order_by(PaymentDetail.method))
    return {
        d.method: {"name": d.name, "number": d.number}
        for d in result.scalars().all()
    }


async def replace_payment_details(
    db: AsyncSession, details: dict[str, dict[str, str]],
) -> None:
    await db.execute(delete(PaymentDetail))
    db.add_all(
        PaymentDetail(method=method, name=d["name"], number=d["number"])
        for method, d in details.items()
    )
    await db.flush()


async def get_setting(db: AsyncSession, key: str) -> str | None:
    result = await db.execute(select(AppSetting.value).where(AppSetting.key == key))
    return result.scalar_one_or_none()


async def put_setting(db: AsyncSession, key: str, value: str) -> None:
    setting = await db.get(AppSetting, key)
    if setting is None:
        db.add(AppSetting(key=key, value=value))
    else:
        setting.value = value
    await db.flush()


async def get_admin_contact(db: AsyncSession, default: str) -> str:
    return await get_setting(db, ADMIN_CONTACT_KEY) or default
