#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from canteen.data.models.user import UserModel
from canteen.data.models.category import CategoryModel
from canteen.data.models.product import ProductModel
from canteen.data.models.cart import CartModel
from canteen.data.models.cart_item import CartItemModel
from canteen.data.models.order import OrderModel
from canteen.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
