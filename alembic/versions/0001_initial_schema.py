"""initial campaign schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-06-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("model_name", sa.String(length=100), nullable=False),
        sa.Column("model_key", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("tier", sa.String(length=20), nullable=False),
        sa.Column("screen_size", sa.Integer(), nullable=True),
        sa.Column("points_value", sa.Integer(), nullable=False),
        sa.Column("ticket_multiplier", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_products")),
        sa.UniqueConstraint("model_key", name=op.f("uq_products_model_key")),
    )
    op.create_table(
        "sellers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("store_name", sa.String(length=200), nullable=False),
        sa.Column("store_city", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("total_points", sa.Integer(), nullable=False),
        sa.Column("total_sales", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sellers")),
    )
    op.create_table(
        "draws",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("preselected_count", sa.Integer(), nullable=True),
        sa.Column("finalists_count", sa.Integer(), nullable=True),
        sa.Column("executed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("results", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_draws")),
    )
    op.create_table(
        "tv_serials",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("serial_number", sa.String(length=64), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("buyer_status", sa.String(length=20), nullable=False),
        sa.Column("seller_status", sa.String(length=20), nullable=False),
        sa.Column("campaign_type", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["products.id"],
            name=op.f("fk_tv_serials_product_id_products"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tv_serials")),
        sa.UniqueConstraint("serial_number", name=op.f("uq_tv_serials_serial_number")),
    )
    op.create_index(
        op.f("ix_tv_serials_product_id"), "tv_serials", ["product_id"], unique=False
    )
    op.create_table(
        "client_purchases",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("serial_id", sa.Integer(), nullable=True),
        sa.Column("serial_number", sa.String(length=64), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("dni", sa.String(length=30), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("coupons_generated", sa.Integer(), nullable=False),
        sa.Column("admin_status", sa.String(length=20), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["products.id"],
            name=op.f("fk_client_purchases_product_id_products"),
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["serial_id"],
            ["tv_serials.id"],
            name=op.f("fk_client_purchases_serial_id_tv_serials"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_client_purchases")),
    )
    op.create_index(
        op.f("ix_client_purchases_serial_id"),
        "client_purchases",
        ["serial_id"],
        unique=False,
    )
    op.create_table(
        "seller_sales",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("seller_id", sa.Integer(), nullable=False),
        sa.Column("serial_id", sa.Integer(), nullable=True),
        sa.Column("serial_number", sa.String(length=64), nullable=False),
        sa.Column("client_name", sa.String(length=200), nullable=False),
        sa.Column("client_phone", sa.String(length=30), nullable=True),
        sa.Column("invoice_number", sa.String(length=64), nullable=True),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["seller_id"],
            ["sellers.id"],
            name=op.f("fk_seller_sales_seller_id_sellers"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["serial_id"],
            ["tv_serials.id"],
            name=op.f("fk_seller_sales_serial_id_tv_serials"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_seller_sales")),
    )
    op.create_index(
        op.f("ix_seller_sales_seller_id"), "seller_sales", ["seller_id"], unique=False
    )
    op.create_table(
        "coupons",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("owner_type", sa.String(length=10), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("buyer_purchase_id", sa.Integer(), nullable=True),
        sa.Column("serial_id", sa.Integer(), nullable=True),
        sa.Column("draw_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["buyer_purchase_id"],
            ["client_purchases.id"],
            name=op.f("fk_coupons_buyer_purchase_id_client_purchases"),
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["draw_id"],
            ["draws.id"],
            name=op.f("fk_coupons_draw_id_draws"),
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["serial_id"],
            ["tv_serials.id"],
            name=op.f("fk_coupons_serial_id_tv_serials"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_coupons")),
        sa.UniqueConstraint("code", name=op.f("uq_coupons_code")),
    )
    op.create_index(op.f("ix_coupons_status"), "coupons", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_coupons_status"), table_name="coupons")
    op.drop_table("coupons")
    op.drop_index(op.f("ix_seller_sales_seller_id"), table_name="seller_sales")
    op.drop_table("seller_sales")
    op.drop_index(op.f("ix_client_purchases_serial_id"), table_name="client_purchases")
    op.drop_table("client_purchases")
    op.drop_index(op.f("ix_tv_serials_product_id"), table_name="tv_serials")
    op.drop_table("tv_serials")
    op.drop_table("draws")
    op.drop_table("sellers")
    op.drop_table("products")
