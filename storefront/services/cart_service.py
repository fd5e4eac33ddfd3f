from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from storefront.domain.errors import MissingUser, NotFound, StorefrontError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.domain.schemas import MAX_QUANTITY
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_QUANTITY = 1


def require_ids(user_id: Any, product_id: Any) -> None:
    if not user_id:
        raise MissingUser("Missing user_id or product_id")
    if not product_id:
        raise ValidationError("Missing user_id or product_id")


def check_quantity(quantity: int, what: str = "Quantity") -> int:
    if abs(quantity) > MAX_QUANTITY:
        raise ValidationError(f"{what} must not exceed {MAX_QUANTITY}")
    return quantity


class CartService:
    """
    Per-user cart, one line per (user_id, product_id).
    Quantity never drops below 1; a line only disappears through remove/clear.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def list_cart(self, user_id: int) -> List[Dict[str, Any]]:
        if not user_id:
            raise MissingUser()
        return self.repo.get_cart_lines(user_id)

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> None:
        require_ids(user_id, product_id)
        quantity = check_quantity(max(MIN_QUANTITY, int(quantity or 0)))

        if self.products.get_product(product_id) is None:
            raise NotFound(f"Product {product_id} not found")

        self.repo.increment_item(user_id, product_id, quantity)
        logger.info(f"Added {quantity} x product {product_id} to cart of user {user_id}")

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> int:
        require_ids(user_id, product_id)
        if quantity is None:
            raise ValidationError("Missing quantity")
        quantity = check_quantity(max(MIN_QUANTITY, int(quantity)))

        #no line -> 0 rows, caller has to add first
        rows = self.repo.set_quantity(user_id, product_id, quantity)
        logger.info(f"Set quantity of product {product_id} for user {user_id} to {quantity} ({rows} row(s))")
        return rows

    def adjust_quantity(self, user_id: int, product_id: int, delta: int) -> int:
        require_ids(user_id, product_id)
        delta = check_quantity(int(delta or 0), "Quantity change")
        rows = self.repo.adjust_quantity(user_id, product_id, delta)
        logger.info(f"Adjusted quantity of product {product_id} for user {user_id} by {delta} ({rows} row(s))")
        return rows

    def remove_item(self, user_id: int, product_id: int) -> bool:
        require_ids(user_id, product_id)
        removed = self.repo.delete_item(user_id, product_id) > 0
        logger.info(f"Removed product {product_id} from cart of user {user_id} (present: {removed})")
        return removed

    def remove_many(self, user_id: int, product_ids: List[int]) -> Tuple[List[int], List[int]]:
        """
        Best effort: every id is tried, a failure on one does not stop the rest
        and nothing already removed is put back.
        Returns (processed ids, failed ids).
        """
        if not user_id:
            raise MissingUser()

        done, failed = [], []
        for product_id in product_ids or []:
            try:
                self.remove_item(user_id, product_id)
                done.append(product_id)
            except StorefrontError as e:
                logger.warning(f"Could not remove product {product_id} from cart of user {user_id}: {e}")
                failed.append(product_id)
        return done, failed

    def clear(self, user_id: int) -> int:
        if not user_id:
            raise MissingUser()
        rows = self.repo.delete_all(user_id)
        logger.info(f"Cleared cart of user {user_id} ({rows} line(s))")
        return rows
