"""Product Schemas — catalog edits with field-level validation."""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from creditmart.core.domain_types import INT_COLUMN_MAX


class ProductCreate(BaseModel):
    """Admin creates a product."""
    name: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=5000)
    image_url: str | None = Field(None, max_length=500)
    stock: int = Field(0, ge=0, le=INT_COLUMN_MAX)

    @field_validator("name", "category")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class ProductUpdate(BaseModel):
    """Admin edits price, visibility or descriptive fields. Stock has its own route."""
    name: str | None = Field(None, min_length=1, max_length=200)
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    category: str | None = Field(None, min_length=1, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=5000)
    image_url: str | None = Field(None, max_length=500)
    active: bool | None = None


class StockAdjustment(BaseModel):
    """Restock (positive) or write-off (negative)."""
    delta: int = Field(ge=-INT_COLUMN_MAX, le=INT_COLUMN_MAX)


class ProductView(BaseModel):
    id: int
    name: str
    price: Decimal
    category: str
    subcategory: str | None = None
    description: str | None = None
    image_url: str | None = None
    stock: int
    active: bool
