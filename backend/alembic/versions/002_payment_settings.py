"""Add payment_details and app_settings.

Revision ID: 002_payment_settings
Revises: 001_marketplace
Create Date: 2026-10-19

Payment accounts shown to buyers for top-ups, plus key/value settings
(admin contact link).
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_payment_settings"
down_revision: Union[str, None] = "001_marketplace"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "payment_details",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("method", sa.String(50), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("number", sa.String(100), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("method", name="uq_payment_details_method"),
    )
    op.create_table(
        "app_settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_table("payment_details")
