"""Schema exports."""

from kart_api.schemas.catalog import (
    CategoryLinkRequest,
    CategoryLinkResponse,
    CategoryResponse,
    DishImageRequest,
    DishListRequest,
    DishListResponse,
    DishPlacementResponse,
    DishPriceRequest,
    DishRequest,
    DishResponse,
    RemovedRestaurantResponse,
    RestaurantCategoriesRequest,
    RestaurantNameRequest,
    RestaurantResponse,
    SearchRequest,
    SearchResultResponse,
)
from kart_api.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrdersByDateRequest,
    OrdersByPhoneRequest,
    OrderStatusUpdate,
)
from kart_api.schemas.otp import SendOtpRequest, SendOtpResponse, VerifyOtpRequest, VerifyOtpResponse

__all__ = [
    "CategoryLinkRequest",
    "CategoryLinkResponse",
    "CategoryResponse",
    "DishImageRequest",
    "DishListRequest",
    "DishListResponse",
    "DishPlacementResponse",
    "DishPriceRequest",
    "DishRequest",
    "DishResponse",
    "RemovedRestaurantResponse",
    "RestaurantCategoriesRequest",
    "RestaurantNameRequest",
    "RestaurantResponse",
    "SearchRequest",
    "SearchResultResponse",
    "OrderCreate",
    "OrderResponse",
    "OrdersByDateRequest",
    "OrdersByPhoneRequest",
    "OrderStatusUpdate",
    "SendOtpRequest",
    "SendOtpResponse",
    "VerifyOtpRequest",
    "VerifyOtpResponse",
]
