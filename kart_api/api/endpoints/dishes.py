"""Dish listing, search and placement endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from kart_api.db.session import get_db
from kart_api.schemas.catalog import (
    DishImageRequest,
    DishListRequest,
    DishListResponse,
    DishPlacementResponse,
    DishPriceRequest,
    DishRequest,
    DishResponse,
    SearchRequest,
    SearchResultResponse,
)
from kart_api.services.catalog_service import (
    PlacementKey,
    add_dish,
    get_dishes,
    remove_dish,
    remove_dish_image,
    search_catalog,
    update_dish_image,
    update_dish_price,
)

router: APIRouter = APIRouter()


def _placement_response(message: str, key: PlacementKey) -> DishPlacementResponse:
    return DishPlacementResponse(
        message=message,
        restaurant_id=key.restaurant_id,
        category_id=key.category_id,
        menu_item_id=key.menu_item_id,
    )


@router.post("/get_dishes", response_model=DishListResponse)
def list_dishes(payload: DishListRequest, db: Session = Depends(get_db)) -> DishListResponse:
    """Return the dishes a restaurant lists under a category."""
    listings = get_dishes(db, payload.restaurant, payload.category)
    return DishListResponse(
        dishes=[
            DishResponse(
                menu_item_id=listing.menu_item_id,
                dish_name=listing.dish_name,
                price=float(listing.price),
                image=listing.image,
            )
            for listing in listings
        ]
    )


@router.post("/search_dish", response_model=list[SearchResultResponse])
def search_dish(payload: SearchRequest, db: Session = Depends(get_db)) -> list[SearchResultResponse]:
    """Search restaurants, categories and dishes by name."""
    hits = search_catalog(db, payload.search_term, payload.tables)
    return [SearchResultResponse(id=hit.id, name=hit.name, table_name=hit.table_name) for hit in hits]


@router.post("/add_new_dish", response_model=DishPlacementResponse, status_code=status.HTTP_201_CREATED)
def create_dish(payload: DishRequest, db: Session = Depends(get_db)):
    """List a dish under a restaurant category; repeated calls report the existing listing."""
    key, created = add_dish(db, payload.restaurant_name, payload.category_name, payload.dish_name)
    if not created:
        body = _placement_response("Dish already exists in this category", key)
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump())
    return _placement_response("Dish added successfully", key)


@router.post("/remove_dish", response_model=DishPlacementResponse)
def delete_dish(payload: DishRequest, db: Session = Depends(get_db)) -> DishPlacementResponse:
    key = remove_dish(db, payload.restaurant_name, payload.category_name, payload.dish_name)
    return _placement_response("Dish removed successfully", key)


@router.post("/add_dishimage", response_model=DishPlacementResponse)
def set_dish_image(payload: DishImageRequest, db: Session = Depends(get_db)) -> DishPlacementResponse:
    key = update_dish_image(db, payload.restaurant_name, payload.category_name, payload.dish_name, payload.image)
    return _placement_response("Dish image updated successfully", key)


@router.post("/remove_dishimage", response_model=DishPlacementResponse)
def clear_dish_image(payload: DishRequest, db: Session = Depends(get_db)) -> DishPlacementResponse:
    key = remove_dish_image(db, payload.restaurant_name, payload.category_name, payload.dish_name)
    return _placement_response("Dish image removed successfully", key)


@router.post("/update_dishprice", response_model=DishPlacementResponse)
def set_dish_price(payload: DishPriceRequest, db: Session = Depends(get_db)) -> DishPlacementResponse:
    key = update_dish_price(db, payload.restaurant_name, payload.category_name, payload.dish_name, payload.price)
    return _placement_response("Dish price updated successfully", key)
