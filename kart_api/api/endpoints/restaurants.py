"""Restaurant endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kart_api.db.session import get_db
from kart_api.models.catalog import Restaurant
from kart_api.schemas.catalog import RemovedRestaurantResponse, RestaurantNameRequest, RestaurantResponse
from kart_api.services.catalog_service import add_restaurant, list_restaurants, remove_restaurant

router: APIRouter = APIRouter()


@router.get("/restaurants", response_model=list[RestaurantResponse])
def get_restaurants(db: Session = Depends(get_db)) -> list[Restaurant]:
    """List every restaurant."""
    return list_restaurants(db)


@router.post("/add_restaurant", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
def create_restaurant(payload: RestaurantNameRequest, db: Session = Depends(get_db)) -> Restaurant:
    return add_restaurant(db, payload.name)


@router.post("/remove_restaurant", response_model=RemovedRestaurantResponse)
def delete_restaurant(payload: RestaurantNameRequest, db: Session = Depends(get_db)) -> RemovedRestaurantResponse:
    """Remove a restaurant together with its category links and dish listings."""
    deleted = remove_restaurant(db, payload.name)
    return RemovedRestaurantResponse(
        message="Restaurant removed successfully",
        deleted=RestaurantResponse.model_validate(deleted),
    )
