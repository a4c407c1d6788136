"""Settings Schemas — payment details and admin contact."""

from pydantic import BaseModel, Field


class PaymentAccount(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    number: str = Field(min_length=1, max_length=100)


class PaymentDetailsUpdate(BaseModel):
    payment_details: dict[str, PaymentAccount]


class AdminContactUpdate(BaseModel):
    admin_contact: str = Field(min_length=1, max_length=500)
