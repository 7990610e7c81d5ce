# canteen/repos/cart_repo.py
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from canteen.data.models.cart import CartModel
from canteen.data.models.cart_item import CartItemModel
from canteen.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int, for_update: bool = False) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.user_id == user_id)
        if for_update:
            # blokada wiersza koszyka - rownolegle checkouty ida po kolei
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_cart(self, cart_id: int) -> int | None:
        # zmiany koszyka czekaja na trwajacy checkout i odwrotnie
        return self.db.execute(
            select(CartModel.cart_id).where(CartModel.cart_id == cart_id).with_for_update()
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.cart_item_id)
                .execution_options(populate_existing=True)
            ).scalars().all()
        )

    def get_cart_lines_with_products(self, cart_id: int):
        return self.db.execute(
            select(CartItemModel, ProductModel)
            .join(ProductModel, CartItemModel.item_id == ProductModel.item_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.cart_item_id)
            .execution_options(populate_existing=True)
        ).all()

    def get_line_quantity(self, cart_id: int, item_id: int):
        # kolumny zamiast encji, zeby nie czytac starego stanu z identity map
        return self.db.execute(
            select(CartItemModel.cart_item_id, CartItemModel.quantity).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.item_id == item_id,
            )
        ).one_or_none()

    def get_owned_line(self, cart_id: int, cart_item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_item_id == cart_item_id,
                CartItemModel.cart_id == cart_id,
            )
        ).scalar_one_or_none()

    def increment_quantity(self, cart_id: int, item_id: int, quantity: int) -> int:
        # atomowo w bazie: quantity = quantity + n, cena bez zmian
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.item_id == item_id,
            )
            .values(quantity=CartItemModel.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def set_quantity(self, cart_id: int, cart_item_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.cart_item_id == cart_item_id,
                CartItemModel.cart_id == cart_id,
            )
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart_item(self, cart_id: int, cart_item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(
                CartItemModel.cart_item_id == cart_item_id,
                CartItemModel.cart_id == cart_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart_items(self, cart_id: int, cart_item_ids: list[int] | None = None) -> int:
        stmt = delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        if cart_item_ids is not None:
            # tylko linie przepisane do zamowienia
            stmt = stmt.where(CartItemModel.cart_item_id.in_(cart_item_ids))
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
