# storefront/repos/favorite_repo.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy import delete, select

from storefront.data.models.favorite import FavoriteModel
from storefront.data.models.product import ProductModel
from storefront.repos.base import BaseRepo
from storefront.repos.upsert import upsert_stmt


class FavoriteRepo(BaseRepo):
    def upsert(self, user_id: int, product_id: int) -> None:
        stmt = upsert_stmt(
            FavoriteModel,
            self.dialect,
            values={
                "user_id": user_id,
                "product_id": product_id,
                "created_at": datetime.now(timezone.utc),
            },
            keys=["user_id", "product_id"],
            update={"created_at": lambda existing, incoming: incoming},
        )
        with self.atomic("add favorite"):
            self.db.execute(stmt)

    def delete(self, user_id: int, product_id: int) -> int:
        with self.atomic("remove favorite"):
            res = self.db.execute(
                delete(FavoriteModel).where(
                    FavoriteModel.user_id == user_id,
                    FavoriteModel.product_id == product_id,
                )
            )
        return res.rowcount

    def get_favorite_products(self, user_id: int) -> List[ProductModel]:
        with self.reading("list favorites"):
            return list(
                self.db.execute(
                    select(ProductModel)
                    .join(FavoriteModel, FavoriteModel.product_id == ProductModel.product_id)
                    .where(FavoriteModel.user_id == user_id)
                    .order_by(FavoriteModel.created_at.desc(), FavoriteModel.id.desc())
                ).scalars().all()
            )
