"""Catalog normalization: find-or-create, restaurant links and garbage collection.

Category workflows match restaurant and category names exactly. Dish workflows
match all three names case-insensitively, since dish names are typed by hand.
Every mutation runs inside one session transaction.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import Select, delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kart_api.db.dialect import conflict_insert
from kart_api.db.session import transaction
from kart_api.models.catalog import (
    Category,
    DishPlacement,
    MenuItem,
    Restaurant,
    RestaurantCategory,
    SearchableTable,
)
from kart_api.services.errors import ConflictError, NotFoundError, NotLinkedError

logger = logging.getLogger(__name__)

SEARCHABLE_MODELS: dict[SearchableTable, type[Restaurant] | type[Category] | type[MenuItem]] = {
    SearchableTable.RESTAURANTS: Restaurant,
    SearchableTable.CATEGORIES: Category,
    SearchableTable.MENU_ITEMS: MenuItem,
}
_NO_SYNC: dict[str, bool] = {"synchronize_session": False}


@dataclass(frozen=True)
class CategoryLink:
    restaurant_id: int
    category_id: int


@dataclass(frozen=True)
class PlacementKey:
    restaurant_id: int
    category_id: int
    menu_item_id: int


@dataclass(frozen=True)
class DishListing:
    menu_item_id: int
    dish_name: str
    price: Decimal
    image: str | None


@dataclass(frozen=True)
class SearchHit:
    id: int
    name: str
    table_name: str


def _ci_equals(column, value: str):
    return func.lower(column) == func.lower(value)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _restaurant_id(db: Session, name: str) -> int:
    restaurant_id: int | None = db.scalar(select(Restaurant.id).where(Restaurant.name == name))
    if restaurant_id is None:
        raise NotFoundError("Restaurant not found")
    return restaurant_id


def _category_id(db: Session, name: str) -> int:
    category_id: int | None = db.scalar(select(Category.id).where(Category.name == name))
    if category_id is None:
        raise NotFoundError("Category not found")
    return category_id


def _find_or_create_category(db: Session, name: str) -> int:
    """Insert the category unless present, then read back whichever row won."""
    db.execute(conflict_insert(db, Category).values(name=name).on_conflict_do_nothing(index_elements=["name"]))
    return _category_id(db, name)


def _find_or_create_menu_item(db: Session, name: str) -> int:
    menu_item_id: int | None = db.scalar(
        select(MenuItem.id).where(_ci_equals(MenuItem.name, name)).order_by(MenuItem.id.asc()).limit(1)
    )
    if menu_item_id is not None:
        return menu_item_id
    menu_item = MenuItem(name=name)
    db.add(menu_item)
    db.flush()
    logger.info("Created menu item id=%s name=%r", menu_item.id, name)
    return menu_item.id


def _collect_orphan_categories(db: Session, category_ids: Iterable[int]) -> int:
    """Delete categories from ``category_ids`` that no restaurant links to any more."""
    ids = set(category_ids)
    if not ids:
        return 0
    result = db.execute(
        delete(Category).where(
            Category.id.in_(ids),
            ~exists().where(RestaurantCategory.category_id == Category.id),
        ),
        execution_options=_NO_SYNC,
    )
    if result.rowcount:
        logger.info("Garbage-collected %s orphaned categories", result.rowcount)
    return result.rowcount


def _collect_orphan_menu_items(db: Session, menu_item_ids: Iterable[int]) -> int:
    """Delete menu items from ``menu_item_ids`` that have no placement left."""
    ids = set(menu_item_ids)
    if not ids:
        return 0
    result = db.execute(
        delete(MenuItem).where(
            MenuItem.id.in_(ids),
            ~exists().where(DishPlacement.menu_item_id == MenuItem.id),
        ),
        execution_options=_NO_SYNC,
    )
    if result.rowcount:
        logger.info("Garbage-collected %s orphaned menu items", result.rowcount)
    return result.rowcount


def _locked_dish_context(restaurant_id: int, category_name: str) -> Select:
    """Select the linked category id, row-locking the restaurant's link.

    Concurrent dish additions to one restaurant category serialize on this lock.
    """
    return (
        select(RestaurantCategory.category_id)
        .join(Category, Category.id == RestaurantCategory.category_id)
        .where(RestaurantCategory.restaurant_id == restaurant_id, _ci_equals(Category.name, category_name))
        .order_by(RestaurantCategory.category_id.asc())
        .limit(1)
        .with_for_update(of=RestaurantCategory)
    )


def _resolve_dish_context(db: Session, restaurant_name: str, category_name: str) -> tuple[int, int]:
    """Case-insensitively resolve a restaurant and one of the categories it offers."""
    restaurant_id: int | None = db.scalar(
        select(Restaurant.id)
        .where(_ci_equals(Restaurant.name, restaurant_name))
        .order_by(Restaurant.id.asc())
        .limit(1)
    )
    if restaurant_id is None:
        raise NotFoundError("Restaurant not found")

    category_id: int | None = db.scalar(_locked_dish_context(restaurant_id, category_name))
    if category_id is None:
        raise NotFoundError("Category not found")
    return restaurant_id, category_id


def _resolve_placement(db: Session, restaurant_name: str, category_name: str, dish_name: str) -> PlacementKey:
    row = db.execute(
        select(DishPlacement.restaurant_id, DishPlacement.category_id, DishPlacement.menu_item_id)
        .join(Restaurant, Restaurant.id == DishPlacement.restaurant_id)
        .join(Category, Category.id == DishPlacement.category_id)
        .join(MenuItem, MenuItem.id == DishPlacement.menu_item_id)
        .where(
            _ci_equals(Restaurant.name, restaurant_name),
            _ci_equals(Category.name, category_name),
            _ci_equals(MenuItem.name, dish_name),
        )
        .order_by(DishPlacement.id.asc())
        .limit(1)
    ).first()
    if row is None:
        raise NotFoundError("Dish not found")
    return PlacementKey(restaurant_id=row[0], category_id=row[1], menu_item_id=row[2])


def _placement_filter(key: PlacementKey):
    return (
        DishPlacement.restaurant_id == key.restaurant_id,
        DishPlacement.category_id == key.category_id,
        DishPlacement.menu_item_id == key.menu_item_id,
    )


def list_restaurants(db: Session) -> list[Restaurant]:
    """Return every restaurant ordered by id."""
    return list(db.scalars(select(Restaurant).order_by(Restaurant.id.asc())))


def add_restaurant(db: Session, name: str) -> Restaurant:
    """Create a restaurant; names are unique."""
    if db.scalar(select(Restaurant.id).where(Restaurant.name == name)) is not None:
        raise ConflictError("Restaurant already exists")

    restaurant = Restaurant(name=name)
    db.add(restaurant)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Restaurant already exists") from exc
    db.refresh(restaurant)
    logger.info("Added restaurant id=%s name=%r", restaurant.id, name)
    return restaurant


def remove_restaurant(db: Session, name: str) -> dict[str, int | str]:
    """Delete a restaurant with its links and placements, then collect orphans."""
    with transaction(db):
        restaurant_id = _restaurant_id(db, name)
        category_ids = set(
            db.scalars(select(RestaurantCategory.category_id).where(RestaurantCategory.restaurant_id == restaurant_id))
        )
        menu_item_ids = set(
            db.scalars(select(DishPlacement.menu_item_id).where(DishPlacement.restaurant_id == restaurant_id))
        )
        db.execute(delete(DishPlacement).where(DishPlacement.restaurant_id == restaurant_id), execution_options=_NO_SYNC)
        db.execute(
            delete(RestaurantCategory).where(RestaurantCategory.restaurant_id == restaurant_id),
            execution_options=_NO_SYNC,
        )
        db.execute(delete(Restaurant).where(Restaurant.id == restaurant_id), execution_options=_NO_SYNC)
        _collect_orphan_menu_items(db, menu_item_ids)
        _collect_orphan_categories(db, category_ids)

    logger.info("Removed restaurant id=%s name=%r", restaurant_id, name)
    return {"id": restaurant_id, "name": name}


def list_categories(db: Session) -> list[Category]:
    """Return every category ordered by id."""
    return list(db.scalars(select(Category).order_by(Category.id.asc())))


def list_restaurant_categories(db: Session, restaurant_name: str) -> list[Category]:
    """Return the distinct categories linked to a restaurant (exact name)."""
    return list(
        db.scalars(
            select(Category)
            .join(RestaurantCategory, RestaurantCategory.category_id == Category.id)
            .join(Restaurant, Restaurant.id == RestaurantCategory.restaurant_id)
            .where(Restaurant.name == restaurant_name)
            .distinct()
            .order_by(Category.id.asc())
        )
    )


def add_category(db: Session, restaurant_name: str, category_name: str) -> CategoryLink:
    """Find-or-create a category and link it to a restaurant; idempotent."""
    with transaction(db):
        restaurant_id = _restaurant_id(db, restaurant_name)
        category_id = _find_or_create_category(db, category_name)
        db.execute(
            conflict_insert(db, RestaurantCategory)
            .values(restaurant_id=restaurant_id, category_id=category_id)
            .on_conflict_do_nothing(index_elements=["restaurant_id", "category_id"])
        )

    logger.info("Linked category id=%s to restaurant id=%s", category_id, restaurant_id)
    return CategoryLink(restaurant_id=restaurant_id, category_id=category_id)


def remove_category(db: Session, restaurant_name: str, category_name: str) -> CategoryLink:
    """Unlink a category from a restaurant and collect whatever became orphaned.

    The restaurant's dishes filed under the category go with the link. The
    category itself is deleted once no restaurant links to it.
    """
    with transaction(db):
        restaurant_id = _restaurant_id(db, restaurant_name)
        category_id = _category_id(db, category_name)

        unlinked = db.execute(
            delete(RestaurantCategory).where(
                RestaurantCategory.restaurant_id == restaurant_id,
                RestaurantCategory.category_id == category_id,
            ),
            execution_options=_NO_SYNC,
        )
        if unlinked.rowcount == 0:
            logger.warning("Category %r is not linked to restaurant %r", category_name, restaurant_name)
            raise NotLinkedError("Category not linked to this restaurant")

        placement_scope = (
            DishPlacement.restaurant_id == restaurant_id,
            DishPlacement.category_id == category_id,
        )
        menu_item_ids = set(db.scalars(select(DishPlacement.menu_item_id).where(*placement_scope)))
        db.execute(delete(DishPlacement).where(*placement_scope), execution_options=_NO_SYNC)
        _collect_orphan_menu_items(db, menu_item_ids)
        _collect_orphan_categories(db, [category_id])

    logger.info("Unlinked category id=%s from restaurant id=%s", category_id, restaurant_id)
    return CategoryLink(restaurant_id=restaurant_id, category_id=category_id)


def get_dishes(db: Session, restaurant_name: str, category_name: str) -> list[DishListing]:
    """Return dishes a restaurant lists under a category (exact names)."""
    restaurant_id = _restaurant_id(db, restaurant_name)
    category_id = _category_id(db, category_name)
    rows = db.execute(
        select(DishPlacement.menu_item_id, MenuItem.name, DishPlacement.price, DishPlacement.image)
        .join(MenuItem, MenuItem.id == DishPlacement.menu_item_id)
        .where(DishPlacement.restaurant_id == restaurant_id, DishPlacement.category_id == category_id)
        .order_by(DishPlacement.id.asc())
    ).all()
    return [
        DishListing(menu_item_id=row[0], dish_name=row[1], price=row[2], image=row[3])
        for row in rows
    ]


def add_dish(db: Session, restaurant_name: str, category_name: str, dish_name: str) -> tuple[PlacementKey, bool]:
    """Place a dish under a restaurant category at price 0.

    Returns the placement key and whether a new placement was created.
    """
    with transaction(db):
        restaurant_id, category_id = _resolve_dish_context(db, restaurant_name, category_name)
        menu_item_id = _find_or_create_menu_item(db, dish_name)
        key = PlacementKey(restaurant_id=restaurant_id, category_id=category_id, menu_item_id=menu_item_id)

        already_placed: bool = bool(db.scalar(select(exists().where(*_placement_filter(key)))))
        db.execute(
            conflict_insert(db, DishPlacement)
            .values(
                restaurant_id=restaurant_id,
                category_id=category_id,
                menu_item_id=menu_item_id,
                price=Decimal("0.00"),
                image=None,
            )
            .on_conflict_do_nothing(index_elements=["restaurant_id", "category_id", "menu_item_id"])
        )

    if already_placed:
        logger.info("Dish %r already listed for restaurant id=%s category id=%s", dish_name, restaurant_id, category_id)
    else:
        logger.info("Listed dish id=%s for restaurant id=%s category id=%s", menu_item_id, restaurant_id, category_id)
    return key, not already_placed


def remove_dish(db: Session, restaurant_name: str, category_name: str, dish_name: str) -> PlacementKey:
    """Delete a placement and the menu item once nothing lists it."""
    with transaction(db):
        key = _resolve_placement(db, restaurant_name, category_name, dish_name)
        db.execute(delete(DishPlacement).where(*_placement_filter(key)), execution_options=_NO_SYNC)
        _collect_orphan_menu_items(db, [key.menu_item_id])

    logger.info("Removed dish placement %s", key)
    return key


def _update_placement(
    db: Session,
    restaurant_name: str,
    category_name: str,
    dish_name: str,
    **values: object,
) -> PlacementKey:
    with transaction(db):
        key = _resolve_placement(db, restaurant_name, category_name, dish_name)
        db.execute(update(DishPlacement).where(*_placement_filter(key)).values(**values), execution_options=_NO_SYNC)
    logger.info("Updated %s for dish placement %s", ", ".join(values), key)
    return key


def update_dish_image(db: Session, restaurant_name: str, category_name: str, dish_name: str, image: str) -> PlacementKey:
    return _update_placement(db, restaurant_name, category_name, dish_name, image=image)


def remove_dish_image(db: Session, restaurant_name: str, category_name: str, dish_name: str) -> PlacementKey:
    return _update_placement(db, restaurant_name, category_name, dish_name, image=None)


def update_dish_price(
    db: Session,
    restaurant_name: str,
    category_name: str,
    dish_name: str,
    price: Decimal,
) -> PlacementKey:
    return _update_placement(db, restaurant_name, category_name, dish_name, price=price)


def search_catalog(db: Session, term: str, tables: Iterable[SearchableTable] | None = None) -> list[SearchHit]:
    """Case-insensitive substring search over the allow-listed catalog tables."""
    selected = dict.fromkeys(tables or SearchableTable)
    pattern: str = f"%{_escape_like(term)}%"

    hits: list[SearchHit] = []
    for table in selected:
        model = SEARCHABLE_MODELS[table]
        rows = db.execute(select(model.id, model.name).where(model.name.ilike(pattern, escape="\\"))).all()
        hits.extend(SearchHit(id=row[0], name=row[1], table_name=table.value) for row in rows)
    return sorted(hits, key=lambda hit: (hit.table_name, hit.id))
