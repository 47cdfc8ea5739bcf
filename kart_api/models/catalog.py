"""Catalog ORM models: restaurants, categories, dishes and their links."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kart_api.db.base import Base


class Restaurant(Base):
    """Root of the catalog."""

    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    category_links: Mapped[list["RestaurantCategory"]] = relationship(back_populates="restaurant")


class Category(Base):
    """Category shared across restaurants."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    restaurant_links: Mapped[list["RestaurantCategory"]] = relationship(back_populates="category")


class RestaurantCategory(Base):
    """A restaurant offers a category."""

    __tablename__ = "restaurant_categories"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "category_id", name="uq_restaurant_category"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)

    restaurant: Mapped[Restaurant] = relationship(back_populates="category_links")
    category: Mapped[Category] = relationship(back_populates="restaurant_links")


class MenuItem(Base):
    """Dish name; identity is contextual through its placements."""

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    placements: Mapped[list["DishPlacement"]] = relationship(back_populates="menu_item")


class DishPlacement(Base):
    """A restaurant sells a dish under a category, at a price."""

    __tablename__ = "restaurant_category_dish"
    __table_args__ = (
        UniqueConstraint(
            "restaurant_id",
            "category_id",
            "menu_item_id",
            name="uq_restaurant_category_dish",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    menu_item_id: Mapped[int] = mapped_column(ForeignKey("menu_items.id"), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    image: Mapped[str | None] = mapped_column(Text, nullable=True)

    menu_item: Mapped[MenuItem] = relationship(back_populates="placements")


class SearchableTable(str, Enum):
    """Catalog tables that may be searched by name."""

    RESTAURANTS = "restaurants"
    CATEGORIES = "categories"
    MENU_ITEMS = "menu_items"
