"""Category endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kart_api.db.session import get_db
from kart_api.models.catalog import Category
from kart_api.schemas.catalog import (
    CategoryLinkRequest,
    CategoryLinkResponse,
    CategoryResponse,
    RestaurantCategoriesRequest,
)
from kart_api.services.catalog_service import (
    add_category,
    list_categories,
    list_restaurant_categories,
    remove_category,
)

router: APIRouter = APIRouter()


@router.get("/categories", response_model=list[CategoryResponse])
def get_all_categories(db: Session = Depends(get_db)) -> list[Category]:
    """List every category across restaurants."""
    return list_categories(db)


@router.post("/categories", response_model=list[CategoryResponse])
def get_restaurant_categories(payload: RestaurantCategoriesRequest, db: Session = Depends(get_db)) -> list[Category]:
    """List the categories a restaurant offers."""
    return list_restaurant_categories(db, payload.restaurant_name)


@router.post("/add_category", response_model=CategoryLinkResponse, status_code=status.HTTP_201_CREATED)
def link_category(payload: CategoryLinkRequest, db: Session = Depends(get_db)) -> CategoryLinkResponse:
    link = add_category(db, payload.restaurant_name, payload.name)
    return CategoryLinkResponse(
        message="Category added and linked to restaurant",
        restaurant_id=link.restaurant_id,
        category_id=link.category_id,
    )


@router.post("/remove_category", response_model=CategoryLinkResponse)
def unlink_category(payload: CategoryLinkRequest, db: Session = Depends(get_db)) -> CategoryLinkResponse:
    link = remove_category(db, payload.restaurant_name, payload.name)
    return CategoryLinkResponse(
        message="Category removed successfully",
        restaurant_id=link.restaurant_id,
        category_id=link.category_id,
    )
