"""Restaurant, category and dish API schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from kart_api.models.catalog import SearchableTable


class RestaurantNameRequest(BaseModel):
    """Payload naming a single restaurant."""

    name: str = Field(min_length=1)


class RestaurantResponse(BaseModel):
    """Serialized restaurant."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class RemovedRestaurantResponse(BaseModel):
    message: str
    deleted: RestaurantResponse


class RestaurantCategoriesRequest(BaseModel):
    restaurant_name: str = Field(min_length=1)


class CategoryResponse(BaseModel):
    """Serialized category."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryLinkRequest(BaseModel):
    """Payload for linking or unlinking a category and a restaurant."""

    name: str = Field(min_length=1)
    restaurant_name: str = Field(min_length=1)


class CategoryLinkResponse(BaseModel):
    message: str
    restaurant_id: int
    category_id: int


class DishListRequest(BaseModel):
    restaurant: str = Field(min_length=1)
    category: str = Field(min_length=1)


class DishResponse(BaseModel):
    """Dish as listed under a restaurant category."""

    menu_item_id: int
    dish_name: str
    price: float
    image: str | None = None


class DishListResponse(BaseModel):
    dishes: list[DishResponse]


class DishRequest(BaseModel):
    """Payload identifying a dish placement by names."""

    restaurant_name: str = Field(min_length=1)
    category_name: str = Field(min_length=1)
    dish_name: str = Field(min_length=1)


class DishImageRequest(DishRequest):
    image: str = Field(min_length=1)


class DishPriceRequest(DishRequest):
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class DishPlacementResponse(BaseModel):
    """Result of a dish mutation."""

    message: str
    restaurant_id: int
    category_id: int
    menu_item_id: int


class SearchRequest(BaseModel):
    """Catalog search payload; ``tables`` restricts the search to known tables."""

    search_term: str = Field(min_length=1)
    tables: list[SearchableTable] | None = None


class SearchResultResponse(BaseModel):
    id: int
    name: str
    table_name: str
