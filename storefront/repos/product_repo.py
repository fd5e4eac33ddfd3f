# storefront/repos/product_repo.py
from typing import Dict, Iterable

from sqlalchemy import select

from storefront.data.models.product import ProductModel
from storefront.repos.base import BaseRepo


class ProductRepo(BaseRepo):
    def get_product(self, product_id: int) -> ProductModel | None:
        with self.reading("get product"):
            return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: Iterable[int]) -> Dict[int, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        with self.reading("get products"):
            rows = self.db.execute(
                select(ProductModel).where(ProductModel.product_id.in_(ids))
            ).scalars().all()
        return {p.product_id: p for p in rows}
