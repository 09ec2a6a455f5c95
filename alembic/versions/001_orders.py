"""Order aggregate tables

Revision ID: 001_orders
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_orders"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("order_uid", sa.String(255), primary_key=True),
        sa.Column("track_number", sa.String(255), nullable=False, server_default=""),
        sa.Column("entry", sa.String(255), nullable=False, server_default=""),
        sa.Column("locale", sa.String(32), nullable=False, server_default=""),
        sa.Column(
            "internal_signature", sa.String(255), nullable=False, server_default=""
        ),
        sa.Column("customer_id", sa.String(255), nullable=False, server_default=""),
        sa.Column(
            "delivery_service", sa.String(255), nullable=False, server_default=""
        ),
        sa.Column("shardkey", sa.String(64), nullable=False, server_default=""),
        sa.Column("sm_id", sa.Integer, nullable=False, server_default="0"),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=True),
        sa.Column("oof_shard", sa.String(64), nullable=False, server_default=""),
        sa.Column(
            "inserted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "delivery",
        sa.Column(
            "order_uid",
            sa.String(255),
            sa.ForeignKey("orders.order_uid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("phone", sa.String(64), nullable=False, server_default=""),
        sa.Column("zip", sa.String(32), nullable=False, server_default=""),
        sa.Column("city", sa.String(255), nullable=False, server_default=""),
        sa.Column("address", sa.String(255), nullable=False, server_default=""),
        sa.Column("region", sa.String(255), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
    )

    op.create_table(
        "payment",
        sa.Column(
            "order_uid",
            sa.String(255),
            sa.ForeignKey("orders.order_uid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("transaction_id", sa.String(255), nullable=False, server_default=""),
        sa.Column("request_id", sa.String(255), nullable=False, server_default=""),
        sa.Column("currency", sa.String(16), nullable=False, server_default=""),
        sa.Column("provider", sa.String(255), nullable=False, server_default=""),
        sa.Column("amount", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("payment_dt", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("bank", sa.String(255), nullable=False, server_default=""),
        sa.Column("delivery_cost", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("goods_total", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("custom_fee", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )

    op.create_table(
        "items",
        sa.Column(
            "order_uid",
            sa.String(255),
            sa.ForeignKey("orders.order_uid", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("position", sa.Integer, primary_key=True),
        sa.Column("chrt_id", sa.BigInteger, nullable=False),
        sa.Column("track_number", sa.String(255), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("rid", sa.String(255), nullable=False, server_default=""),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("sale", sa.Integer, nullable=False, server_default="0"),
        sa.Column("size", sa.String(64), nullable=False, server_default=""),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("nm_id", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("brand", sa.String(255), nullable=False, server_default=""),
        sa.Column("status", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_items_chrt_id", "items", ["chrt_id"])


def downgrade() -> None:
    op.drop_index("ix_items_chrt_id", table_name="items")
    op.drop_table("items")
    op.drop_table("payment")
    op.drop_table("delivery")
    op.drop_table("orders")
