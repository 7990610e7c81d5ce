import os

# przed importem aplikacji - settings czytaja env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SEED_ON_STARTUP"] = "false"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from canteen.api.auth import create_access_token
from canteen.data.database import Base, SessionLocal, engine, init_db
from canteen.data.models import CategoryModel, ProductModel, UserModel

ADMIN_ID = 1
CUSTOMER_ID = 2
OTHER_CUSTOMER_ID = 3


@pytest.fixture(autouse=True)
def setup_db():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def users(db):
    db.add_all([
        UserModel(user_id=ADMIN_ID, name="Admin", email="admin@canteen.test", is_admin=True),
        UserModel(user_id=CUSTOMER_ID, name="John Doe", email="john@example.com"),
        UserModel(user_id=OTHER_CUSTOMER_ID, name="Jane Roe", email="jane@example.com"),
    ])
    db.commit()
    return {"admin": ADMIN_ID, "customer": CUSTOMER_ID, "other": OTHER_CUSTOMER_ID}


@pytest.fixture
def products(db):
    db.add_all([
        CategoryModel(category_name="Burger"),
        CategoryModel(category_name="Pasta"),
        CategoryModel(category_name="Desserts"),
    ])
    burger = ProductModel(
        title="Double Cheese Potato Burger",
        category="Burger",
        price=Decimal("45.00"),
        image_url="assets/images/burger.jpg",
        available=True,
    )
    pasta = ProductModel(
        title="Red Sauce Pasta",
        category="Pasta",
        price=Decimal("80.00"),
        image_url="assets/images/pasta.jpg",
        available=True,
    )
    sold_out = ProductModel(
        title="White Sauce Pasta",
        category="Pasta",
        price=Decimal("80.00"),
        available=False,
    )
    db.add_all([burger, pasta, sold_out])
    db.commit()
    return {"burger": burger.item_id, "pasta": pasta.item_id, "sold_out": sold_out.item_id}


@pytest.fixture
def client():
    from canteen.main import app

    return TestClient(app)


def auth_headers(user_id: int, is_admin: bool = False) -> dict:
    token = create_access_token(user_id, is_admin=is_admin, email=f"user{user_id}@canteen.test")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(users):
    return auth_headers(CUSTOMER_ID)


@pytest.fixture
def other_headers(users):
    return auth_headers(OTHER_CUSTOMER_ID)


@pytest.fixture
def admin_headers(users):
    return auth_headers(ADMIN_ID, is_admin=True)
