# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import case, delete, select, update

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.repos.base import BaseRepo
from storefront.repos.upsert import upsert_stmt


class CartRepo(BaseRepo):
    def get_cart_lines(self, user_id: int) -> List[dict]:
        with self.reading("list cart"):
            rows = self.db.execute(
                select(
                    CartItemModel.product_id,
                    CartItemModel.quantity,
                    ProductModel.name,
                    ProductModel.price,
                    ProductModel.image,
                )
                .join(ProductModel, ProductModel.product_id == CartItemModel.product_id)
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.id)
            ).mappings().all()
        return [dict(r) for r in rows]

    def increment_item(self, user_id: int, product_id: int, quantity: int) -> None:
        #one statement, concurrent adds for the same line both land
        stmt = upsert_stmt(
            CartItemModel,
            self.dialect,
            values={"user_id": user_id, "product_id": product_id, "quantity": quantity},
            keys=["user_id", "product_id"],
            update={"quantity": lambda existing, incoming: existing + incoming},
        )
        with self.atomic("add cart item"):
            self.db.execute(stmt)

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> int:
        with self.atomic("update cart quantity"):
            res = self.db.execute(
                update(CartItemModel)
                .where(CartItemModel.user_id == user_id, CartItemModel.product_id == product_id)
                .execution_options(synchronize_session=False)
                .values(quantity=quantity)
            )
        return res.rowcount

    def adjust_quantity(self, user_id: int, product_id: int, delta: int) -> int:
        new_qty = CartItemModel.quantity + delta
        with self.atomic("adjust cart quantity"):
            res = self.db.execute(
                update(CartItemModel)
                .where(CartItemModel.user_id == user_id, CartItemModel.product_id == product_id)
                .execution_options(synchronize_session=False)
                .values(quantity=case((new_qty < 1, 1), else_=new_qty))
            )
        return res.rowcount

    def delete_item(self, user_id: int, product_id: int) -> int:
        with self.atomic("remove cart item"):
            res = self.db.execute(
                delete(CartItemModel).where(
                    CartItemModel.user_id == user_id,
                    CartItemModel.product_id == product_id,
                )
            )
        return res.rowcount

    def delete_all(self, user_id: int) -> int:
        with self.atomic("clear cart"):
            res = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return res.rowcount
