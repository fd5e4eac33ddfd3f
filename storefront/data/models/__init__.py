#import all models so SQLAlchemy registers them on Base.metadata

from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.favorite import FavoriteModel
from storefront.data.models.order import OrderModel

__all__ = ["ProductModel", "CartItemModel", "FavoriteModel", "OrderModel"]
