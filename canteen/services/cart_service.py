# canteen/services/cart_service.py
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from canteen.data.models.cart import CartModel
from canteen.data.models.cart_item import CartItemModel
from canteen.domain.errors import InternalError, InvalidInput, NotFound
from canteen.domain.money import cart_total, line_total, to_money
from canteen.repos.cart_repo import CartRepo
from canteen.services.catalog_service import CatalogService
from canteen.utils.logging import get_logger
from canteen.utils.retry import unique_conflict_retry

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs i proste use case dla domeny cart
    commands (add, set quantity, remove, clear) modyfikuja stan
    query (view) tylko odczyt

    Jeden koszyk na uzytkownika, tworzony leniwie przy pierwszym uzyciu.
    Cena linii jest zapamietywana przy dodaniu i potem sie nie zmienia.
    """

    def __init__(self, db: Session, catalog: CatalogService | None = None):
        self.repo = CartRepo(db)
        self.catalog = catalog or CatalogService(db)

    def get_or_create_cart(self, user_id: int) -> int:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart.cart_id

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id))
        except IntegrityError as e:
            # unique na user_id - ktos inny wlasnie utworzyl koszyk, pobierz go
            self.repo.rollback()
            cart = self.repo.get_cart_by_user(user_id)
            if cart is None:
                logger.error(f"Failed to create cart for user {user_id}: {e}")
                raise InternalError("Failed to create cart") from e
            logger.info(f"Cart for user {user_id} created concurrently, using cart {cart.cart_id}")
            return cart.cart_id
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to create cart for user {user_id}: {e}")
            raise InternalError("Failed to create cart") from e

        logger.info(f"Created cart {created.cart_id} for user {user_id}")
        return created.cart_id

    #query - odczyt
    def view(self, user_id: int) -> Dict[str, Any]:
        cart_id = self.get_or_create_cart(user_id)

        try:
            rows = self.repo.get_cart_lines_with_products(cart_id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Cart fetch error for user {user_id}: {e}")
            raise InternalError("Failed to fetch cart") from e

        lines = [line for line, _ in rows]

        #dict przyksztalcany w jsona
        return {
            "cart_id": cart_id,
            "items": [
                {
                    "cart_item_id": line.cart_item_id,
                    "item_id": line.item_id,
                    "title": product.title,
                    "image_url": product.image_url,
                    "available": product.available,
                    "unit_price": to_money(line.unit_price),
                    "quantity": line.quantity,
                    "line_total": line_total(line.unit_price, line.quantity),
                }
                for line, product in rows
            ],
            "total": cart_total(lines),
        }

    #commands
    def _lock(self, cart_id: int):
        # ta sama blokada wiersza koszyka co w checkout
        if self.repo.lock_cart(cart_id) is None:
            raise NotFound("Cart not found")

    def add_item(self, user_id: int, product_id: int, quantity: int | None = 1) -> Dict[str, Any]:
        if not product_id:
            raise InvalidInput("Item ID is required")

        # jak w starym API: brak / bzdura / <= 0 -> 1
        qty = max(1, quantity or 1)

        cart_id = self.get_or_create_cart(user_id)
        product = self.catalog.get_available_product(product_id)

        try:
            line_id, new_quantity, created = self._merge_line(
                cart_id, product.item_id, qty, to_money(product.price)
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Add to cart error (cart {cart_id}, product {product_id}): {e}")
            raise InternalError("Failed to add item to cart") from e

        if created:
            logger.info(f"Added product {product_id} x{qty} to cart {cart_id} at {product.price}")
        else:
            logger.info(f"Product {product_id} already in cart {cart_id}, quantity now {new_quantity}")

        return {"cart_item_id": line_id, "quantity": new_quantity, "created": created}

    @unique_conflict_retry()
    def _merge_line(self, cart_id: int, item_id: int, quantity: int, unit_price):
        try:
            self._lock(cart_id)
            if self.repo.increment_quantity(cart_id, item_id, quantity) == 0:
                line = self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart_id,
                        item_id=item_id,
                        quantity=quantity,
                        unit_price=unit_price,
                    )
                )
                line_id = line.cart_item_id
                self.repo.commit()
                return line_id, quantity, True

            row = self.repo.get_line_quantity(cart_id, item_id)
            self.repo.commit()
            return row.cart_item_id, row.quantity, False
        except IntegrityError:
            # rownolegle dodanie tego samego produktu (u_cart_product)
            self.repo.rollback()
            logger.warning(f"Concurrent insert of product {item_id} into cart {cart_id}, retrying")
            raise

    def set_quantity(self, user_id: int, cart_item_id: int, quantity: int) -> Dict[str, Any]:
        cart_id = self.get_or_create_cart(user_id)

        try:
            self._lock(cart_id)
            line = self.repo.get_owned_line(cart_id, cart_item_id)
            if not line:
                self.repo.rollback()
                raise NotFound("Cart item not found")

            if quantity <= 0:
                self.repo.delete_cart_item(cart_id, cart_item_id)
                self.repo.commit()
                logger.info(f"Cart item {cart_item_id} removed from cart {cart_id} (quantity {quantity})")
                return {"deleted": True}

            self.repo.set_quantity(cart_id, cart_item_id, quantity)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Update cart error (cart {cart_id}, item {cart_item_id}): {e}")
            raise InternalError("Failed to update cart item") from e

        logger.info(f"Cart item {cart_item_id} in cart {cart_id} set to quantity {quantity}")
        return {"quantity": quantity}

    def remove_item(self, user_id: int, cart_item_id: int):
        cart_id = self.get_or_create_cart(user_id)

        try:
            self._lock(cart_id)
            deleted = self.repo.delete_cart_item(cart_id, cart_item_id)
            if deleted == 0:
                self.repo.rollback()
                raise NotFound("Cart item not found")
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Remove cart item error (cart {cart_id}, item {cart_item_id}): {e}")
            raise InternalError("Failed to remove cart item") from e

        logger.info(f"Cart item {cart_item_id} removed from cart {cart_id}")

    def clear(self, user_id: int):
        cart_id = self.get_or_create_cart(user_id)

        try:
            self._lock(cart_id)
            removed = self.repo.delete_cart_items(cart_id)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Clear cart error (cart {cart_id}): {e}")
            raise InternalError("Failed to clear cart") from e

        logger.info(f"Cart {cart_id} cleared ({removed} line(s))")
