"""catalog, orders and pending logins schema

Revision ID: 0001_catalog_schema
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_catalog_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
    )
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
    )
    op.create_table(
        "restaurant_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.UniqueConstraint("restaurant_id", "category_id", name="uq_restaurant_category"),
    )
    op.create_index("ix_restaurant_categories_restaurant_id", "restaurant_categories", ["restaurant_id"])
    op.create_index("ix_restaurant_categories_category_id", "restaurant_categories", ["category_id"])
    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
    )
    op.create_table(
        "restaurant_category_dish",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("menu_item_id", sa.Integer(), sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("image", sa.Text(), nullable=True),
        sa.UniqueConstraint("restaurant_id", "category_id", "menu_item_id", name="uq_restaurant_category_dish"),
    )
    op.create_index("ix_restaurant_category_dish_restaurant_id", "restaurant_category_dish", ["restaurant_id"])
    op.create_index("ix_restaurant_category_dish_category_id", "restaurant_category_dish", ["category_id"])
    op.create_index("ix_restaurant_category_dish_menu_item_id", "restaurant_category_dish", ["menu_item_id"])
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("restaurant_name", sa.String(length=255), nullable=False),
        sa.Column("food_order_items", sa.JSON(), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("location_url", sa.Text(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("order_status", sa.String(length=32), nullable=False, server_default="placed"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_orders_phone", "orders", ["phone"])
    op.create_index("ix_orders_created_at", "orders", ["created_at"])
    op.create_table(
        "kk_pending_logins",
        sa.Column("phone", sa.String(length=10), primary_key=True),
        sa.Column("otp", sa.String(length=6), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("kk_pending_logins")
    op.drop_index("ix_orders_created_at", table_name="orders")
    op.drop_index("ix_orders_phone", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_restaurant_category_dish_menu_item_id", table_name="restaurant_category_dish")
    op.drop_index("ix_restaurant_category_dish_category_id", table_name="restaurant_category_dish")
    op.drop_index("ix_restaurant_category_dish_restaurant_id", table_name="restaurant_category_dish")
    op.drop_table("restaurant_category_dish")
    op.drop_table("menu_items")
    op.drop_index("ix_restaurant_categories_category_id", table_name="restaurant_categories")
    op.drop_index("ix_restaurant_categories_restaurant_id", table_name="restaurant_categories")
    op.drop_table("restaurant_categories")
    op.drop_table("categories")
    op.drop_table("restaurants")
