"""create coupons and user_coupons tables

Revision ID: c47d9e1b2f65
Revises: 8b2e4d6f1a93
Create Date: 2026-10-12 10:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c47d9e1b2f65"
down_revision = "8b2e4d6f1a93"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "coupons",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_type", sa.String(length=20), nullable=False),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("min_order_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("max_discount", sa.Numeric(10, 2), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("merchant_id", sa.String(length=36), nullable=True),
        sa.Column("total_limit", sa.Integer(), nullable=False),
        sa.Column("per_user_limit", sa.Integer(), nullable=False),
        sa.Column("usage_count", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_coupons_code"), "coupons", ["code"], unique=True)
    op.create_index(op.f("ix_coupons_merchant_id"), "coupons", ["merchant_id"])

    op.create_table(
        "user_coupons",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("coupon_id", sa.String(length=36), nullable=False),
        sa.Column("order_id", sa.String(length=36), nullable=False),
        sa.Column("redemption_seq", sa.Integer(), nullable=False),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["coupon_id"], ["coupons.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "coupon_id", "redemption_seq", name="uq_user_coupons_redemption_seq"
        ),
    )
    op.create_index(op.f("ix_user_coupons_user_id"), "user_coupons", ["user_id"])
    op.create_index(op.f("ix_user_coupons_coupon_id"), "user_coupons", ["coupon_id"])
    op.create_index(op.f("ix_user_coupons_order_id"), "user_coupons", ["order_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_user_coupons_order_id"), table_name="user_coupons")
    op.drop_index(op.f("ix_user_coupons_coupon_id"), table_name="user_coupons")
    op.drop_index(op.f("ix_user_coupons_user_id"), table_name="user_coupons")
    op.drop_table("user_coupons")
    op.drop_index(op.f("ix_coupons_merchant_id"), table_name="coupons")
    op.drop_index(op.f("ix_coupons_code"), table_name="coupons")
    op.drop_table("coupons")
