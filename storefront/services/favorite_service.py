from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import MissingUser, NotFound
from storefront.repos.favorite_repo import FavoriteRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_service import require_ids
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, db: Session):
        self.repo = FavoriteRepo(db)
        self.products = ProductRepo(db)

    def add(self, user_id: int, product_id: int) -> None:
        """Upsert, re-adding only refreshes created_at."""
        require_ids(user_id, product_id)
        if self.products.get_product(product_id) is None:
            raise NotFound(f"Product {product_id} not found")
        self.repo.upsert(user_id, product_id)
        logger.info(f"Product {product_id} favorited by user {user_id}")

    def remove(self, user_id: int, product_id: int) -> bool:
        require_ids(user_id, product_id)
        removed = self.repo.delete(user_id, product_id) > 0
        logger.info(f"Product {product_id} unfavorited by user {user_id} (present: {removed})")
        return removed

    def list_favorites(self, user_id: int) -> List[ProductModel]:
        if not user_id:
            raise MissingUser()
        return self.repo.get_favorite_products(user_id)
