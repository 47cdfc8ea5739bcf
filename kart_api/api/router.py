"""API router composition."""

from fastapi import APIRouter

from kart_api.api.endpoints import categories, dishes, orders, otp, restaurants

api_router: APIRouter = APIRouter()
api_router.include_router(restaurants.router, tags=["restaurants"])
api_router.include_router(categories.router, tags=["categories"])
api_router.include_router(dishes.router, tags=["dishes"])
api_router.include_router(orders.router, tags=["orders"])
api_router.include_router(otp.router, tags=["otp"])
