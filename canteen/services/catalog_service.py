# canteen/services/catalog_service.py
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from canteen.data.models.category import CategoryModel
from canteen.data.models.product import DEFAULT_IMAGE_URL, ProductModel
from canteen.domain.errors import InternalError, InvalidInput, NotFound
from canteen.domain.money import to_money
from canteen.domain.schemas import ProductIn
from canteen.repos.catalog_repo import CatalogRepo
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CatalogService:
    """
    Menu i kategorie. Koszyk korzysta tylko z get_product,
    reszta to panel admina.
    """

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def get_product(self, item_id: int) -> ProductModel:
        product = self.repo.get_product(item_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def get_available_product(self, item_id: int) -> ProductModel:
        product = self.repo.get_product(item_id)
        if not product or not product.available:
            raise NotFound("Product not found or unavailable")
        return product

    def list_menu(self) -> list[ProductModel]:
        return self.repo.list_available_products()

    def list_products(self) -> list[ProductModel]:
        return self.repo.list_products()

    def _validate_product(self, data: ProductIn):
        title = _clean(data.title)
        category = _clean(data.category)
        if not title or not category or data.price is None:
            raise InvalidInput("Title, category, and price are required")

        try:
            price = to_money(data.price)
        except InvalidOperation:
            raise InvalidInput("Price must be a positive number")
        if not price.is_finite() or price <= Decimal("0"):
            raise InvalidInput("Price must be a positive number")

        return title, category, price

    def create_product(self, data: ProductIn) -> ProductModel:
        title, category, price = self._validate_product(data)

        product = ProductModel(
            title=title,
            description=_clean(data.description),
            category=category,
            price=price,
            calories=data.calories or None,
            image_url=data.image_url or DEFAULT_IMAGE_URL,
            available=True if data.available is None else data.available,
        )

        try:
            created = self.repo.create_product(product)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Add product error: {e}")
            raise InternalError("Failed to add product") from e

        logger.info(f"Product {created.item_id} ({created.title}) added to category {created.category}")
        return created

    def update_product(self, item_id: int, data: ProductIn) -> ProductModel:
        title, category, price = self._validate_product(data)

        product = self.get_product(item_id)

        product.title = title
        product.description = _clean(data.description)
        product.category = category
        product.price = price
        product.calories = data.calories or None
        product.image_url = data.image_url or None
        product.available = True if data.available is None else data.available

        try:
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Update product error: {e}")
            raise InternalError("Failed to update product") from e

        # ceny w koszykach i zamowieniach zostaja takie jak byly
        logger.info(f"Product {item_id} updated (price {price}, available={product.available})")
        return product

    def delete_product(self, item_id: int):
        product = self.get_product(item_id)

        try:
            self.repo.delete_product(product)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Delete product error: {e}")
            raise InternalError("Failed to delete product") from e

        logger.info(f"Product {item_id} deleted")

    def list_categories(self) -> list[CategoryModel]:
        return self.repo.list_active_categories()

    def create_category(self, name: str | None) -> CategoryModel:
        name = _clean(name)
        if not name:
            raise InvalidInput("Category name is required")

        existing = self.repo.get_category_by_name(name)
        if existing and existing.is_active:
            raise InvalidInput("Category already exists")

        try:
            if existing:
                #wczesniej usunieta (soft delete) - przywracamy ten sam wiersz
                existing.is_active = True
                self.repo.commit()
                category = existing
            else:
                category = self.repo.create_category(CategoryModel(category_name=name))
        except IntegrityError as e:
            self.repo.rollback()
            raise InvalidInput("Category already exists") from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Add category error: {e}")
            raise InternalError("Failed to add category") from e

        logger.info(f"Category {category.category_id} ({category.category_name}) added")
        return category

    def delete_category(self, category_id: int):
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFound("Category not found")

        in_use = self.repo.count_products_in_category(category.category_name)
        if in_use > 0:
            logger.warning(
                f"Refusing to delete category {category_id}: used by {in_use} product(s)"
            )
            raise InvalidInput("Cannot delete category. It is being used by products.")

        category.is_active = False
        try:
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Delete category error: {e}")
            raise InternalError("Failed to delete category") from e

        logger.info(f"Category {category_id} deactivated")
