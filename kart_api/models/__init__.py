"""Application models package."""

from kart_api.models.catalog import Category, DishPlacement, MenuItem, Restaurant, RestaurantCategory
from kart_api.models.order import Order
from kart_api.models.pending_login import PendingLogin

__all__ = [
    "Restaurant", "Category", "RestaurantCategory", "MenuItem", "DishPlacement", "Order", "PendingLogin",
]
