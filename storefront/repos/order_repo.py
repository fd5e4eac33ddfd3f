# storefront/repos/order_repo.py
from typing import List, Optional

from sqlalchemy import select

from storefront.data.models.order import OrderModel
from storefront.repos.base import BaseRepo


class OrderRepo(BaseRepo):
    def create_order(self, order: OrderModel) -> OrderModel:
        #items and billing live on the same row, one insert = all or nothing
        with self.atomic("create order"):
            self.db.add(order)
            self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        with self.reading("get order"):
            return self.db.get(OrderModel, order_id)

    def list_orders(self, user_id: Optional[int] = None) -> List[OrderModel]:
        stmt = select(OrderModel)
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        stmt = stmt.order_by(OrderModel.order_date.desc(), OrderModel.order_id.desc())
        with self.reading("list orders"):
            return list(self.db.execute(stmt).scalars().all())
