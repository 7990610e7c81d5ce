# canteen/data/seed.py
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from canteen.data.database import SessionLocal, init_db
from canteen.data.models.category import CategoryModel
from canteen.data.models.product import ProductModel
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORIES = [
    "Snacks", "Beverages", "Meals", "Desserts", "Burger",
    "Sandwich", "Maggi", "Fries", "Pasta", "Bakery",
]

# (title, category, price, calories, image_url)
DEFAULT_MENU = [
    ("Double Cheese Potato Burger", "Burger", "45", "220 - 280 Kcal", "assets/images/burger.jpg"),
    ("Cheese Sandwich", "Sandwich", "45", "250 - 300 Kcal", "assets/images/sandwich1.jpg"),
    ("Veg Club Sandwich", "Sandwich", "60", "320 - 400 Kcal", "assets/images/s2.jpg"),
    ("Masala Maggi", "Maggi", "25", "150 - 280 Kcal", "assets/images/maggie.jpg"),
    ("Cheese Veg Maggi", "Maggi", "45", "175 - 235 Kcal", "assets/images/cheese-maggie.jpg"),
    ("Masala Fries", "Fries", "35", "120 - 185 Kcal", "assets/images/frenchfries.jpg"),
    ("Cheese Fries", "Fries", "40", "140 - 156 Kcal", "assets/images/cheese-fries.jpg"),
    ("Red Sauce Pasta", "Pasta", "80", "241 - 321 Kcal", "assets/images/pasta.jpg"),
    ("White Sauce Pasta", "Pasta", "80", "265 - 321 Kcal", "assets/images/white-pasta.jpg"),
    ("Cold Coffee", "Beverages", "35", "255 - 360 Kcal", "assets/images/cold-coffee.jpg"),
    ("Tea", "Beverages", "10", "155 - 225 Kcal", "assets/images/tea.jpg"),
    ("Veg Puff", "Bakery", "35", "260 - 320 Kcal", "assets/images/puff.jpg"),
]


def seed_db(db: Session) -> bool:
    # not forcing: only seed if empty
    if db.execute(select(ProductModel.item_id).limit(1)).first():
        return False

    existing = set(db.execute(select(CategoryModel.category_name)).scalars().all())
    for name in DEFAULT_CATEGORIES:
        if name not in existing:
            db.add(CategoryModel(category_name=name))

    for title, category, price, calories, image_url in DEFAULT_MENU:
        db.add(
            ProductModel(
                title=title,
                category=category,
                price=Decimal(price),
                calories=calories,
                image_url=image_url,
                available=True,
            )
        )

    db.commit()
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} categories and {len(DEFAULT_MENU)} menu items")
    return True


def seed():
    db = SessionLocal()
    try:
        seed_db(db)
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
    seed()
