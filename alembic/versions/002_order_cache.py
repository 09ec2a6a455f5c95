"""Serialized order mirror (order_cache)

Revision ID: 002_order_cache
Revises: 001_orders
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_order_cache"
down_revision: Union[str, None] = "001_orders"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "order_cache",
        sa.Column(
            "order_uid",
            sa.String(255),
            sa.ForeignKey("orders.order_uid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("data", sa.LargeBinary, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("order_cache")
