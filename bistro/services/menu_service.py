import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bistro.database import AsyncSessionLocal
from bistro.errors import NotFound
from bistro.models.menu import Category, MenuItem
from bistro.schemas.menu import MenuItemCreate, MenuItemUpdate
from bistro.services.pricing import to_money

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_URL = "logo.png"

_CATEGORY_SEED = [
    {"name": "Artisan Pizzas", "slug": "pizzas", "sort_order": 1},
    {"name": "Handmade Pasta", "slug": "pasta", "sort_order": 2},
    {"name": "Starters", "slug": "starters", "sort_order": 3},
    {"name": "Desserts", "slug": "desserts", "sort_order": 4},
]

_UNSPLASH = "https://images.unsplash.com/{}?auto=format&fit=crop&q=80&w=800"

# Listed in insertion order; ids follow this order on an empty table.
_MENU_SEED = [
    {
        "category": "pizzas",
        "name": "Margherita di Bufala",
        "description": "San Marzano tomato DOP, buffalo mozzarella, fresh basil, extra virgin olive oil.",
        "price": Decimal("18.00"),
        "image_url": _UNSPLASH.format("photo-1574071318508-1cdbab80d002"),
        "is_popular": True,
        "is_vegetarian": True,
    },
    {
        "category": "pizzas",
        "name": "Tartufo e Funghi",
        "description": "Black truffle cream, wild mushrooms, fior di latte, thyme.",
        "price": Decimal("24.00"),
        "image_url": _UNSPLASH.format("photo-1513104890138-7c749659a591"),
        "is_popular": True,
        "is_vegetarian": True,
    },
    {
        "category": "pizzas",
        "name": "Diavola",
        "description": "Spicy salami, tomato, mozzarella, chili oil.",
        "price": Decimal("22.00"),
        "image_url": _UNSPLASH.format("photo-1628840042765-356cda07504e"),
        "is_spicy": True,
    },
    {
        "category": "pasta",
        "name": "Cacio e Pepe",
        "description": "Tonnarelli, pecorino romano, toasted black pepper.",
        "price": Decimal("20.00"),
        "image_url": _UNSPLASH.format("photo-1612874742237-6526221588e3"),
        "is_vegetarian": True,
    },
    {
        "category": "pasta",
        "name": "Pappardelle al Cinghiale",
        "description": "Slow-braised wild boar ragu, ribbon pasta, parmigiano.",
        "price": Decimal("26.00"),
        "image_url": _UNSPLASH.format("photo-1551183053-bf91a1d81141"),
        "is_popular": True,
    },
    {
        "category": "starters",
        "name": "Burrata & Peach",
        "description": "Creamy burrata, grilled peaches, basil, aged balsamic.",
        "price": Decimal("16.00"),
        "image_url": _UNSPLASH.format("photo-1608897013039-887f21d8c804"),
        "is_vegetarian": True,
    },
    {
        "category": "starters",
        "name": "Arancini",
        "description": "Crispy saffron risotto balls, mozzarella heart, tomato dip.",
        "price": Decimal("14.00"),
        "image_url": _UNSPLASH.format("photo-1541745537411-b8046dc6d66c"),
        "is_vegetarian": True,
    },
    {
        "category": "desserts",
        "name": "Classic Tiramisu",
        "description": "Espresso-soaked savoiardi, mascarpone cream, cocoa.",
        "price": Decimal("12.00"),
        "image_url": _UNSPLASH.format("photo-1571877227200-a0d98ea607e9"),
        "is_popular": True,
    },
]


async def seed_menu() -> None:
    """Populate the catalog if it has no categories. Called once on startup."""
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Category).limit(1))
        if result.scalars().first() is not None:
            return

        categories = {data["slug"]: Category(**data) for data in _CATEGORY_SEED}
        db.add_all(categories.values())
        await db.flush()

        for item_data in _MENU_SEED:
            item_data = dict(item_data)
            category = categories[item_data.pop("category")]
            db.add(MenuItem(category_id=category.id, **item_data))
        await db.commit()
        logger.info(
            "Seeded menu catalog",
            extra={"categories": len(_CATEGORY_SEED), "menu_items": len(_MENU_SEED)},
        )


async def list_menu(db: AsyncSession) -> list[Category]:
    result = await db.execute(
        select(Category)
        .options(selectinload(Category.items))
        .order_by(Category.sort_order, Category.id)
    )
    return list(result.scalars().all())


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.sort_order, Category.id))
    return list(result.scalars().all())


async def _require_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")
    return category


async def create_menu_item(db: AsyncSession, data: MenuItemCreate) -> MenuItem:
    await _require_category(db, data.category_id)
    item = MenuItem(
        category_id=data.category_id,
        name=data.name,
        description=data.description,
        price=to_money(data.price),
        image_url=data.image_url or DEFAULT_IMAGE_URL,
        is_popular=data.is_popular,
        is_vegetarian=data.is_vegetarian,
        is_spicy=data.is_spicy,
    )
    db.add(item)
    await db.commit()
    logger.info("Menu item created", extra={"menu_item_id": item.id, "item_name": item.name})
    return item


async def update_menu_item(db: AsyncSession, item_id: int, data: MenuItemUpdate) -> MenuItem:
    """Apply a partial update. Past orders keep their own price snapshot."""
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "category_id" in changes:
        await _require_category(db, changes["category_id"])

    item = await db.get(MenuItem, item_id)
    if item is None:
        raise NotFound("Menu item not found")

    if "price" in changes:
        changes["price"] = to_money(changes["price"])
    if "image_url" in changes:
        changes["image_url"] = changes["image_url"] or DEFAULT_IMAGE_URL
    for field, value in changes.items():
        setattr(item, field, value)

    await db.commit()
    logger.info(
        "Menu item updated",
        extra={"menu_item_id": item.id, "fields": sorted(changes)},
    )
    return item
