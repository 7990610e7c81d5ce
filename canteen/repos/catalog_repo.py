# canteen/repos/catalog_repo.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from canteen.data.models.category import CategoryModel
from canteen.data.models.product import ProductModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # produkty
    def get_product(self, item_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, item_id)

    def list_available_products(self) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.available.is_(True))
                .order_by(ProductModel.category, ProductModel.title)
            ).scalars().all()
        )

    def list_products(self) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.item_id.desc())
            ).scalars().all()
        )

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel):
        self.db.delete(product)
        self.db.commit()

    def count_products_in_category(self, category_name: str) -> int:
        return self.db.execute(
            select(func.count(ProductModel.item_id)).where(ProductModel.category == category_name)
        ).scalar_one()

    # kategorie
    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.category_name == name)
        ).scalar_one_or_none()

    def list_active_categories(self) -> list[CategoryModel]:
        return list(
            self.db.execute(
                select(CategoryModel)
                .where(CategoryModel.is_active.is_(True))
                .order_by(CategoryModel.category_name)
            ).scalars().all()
        )

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
