# storefront/services/order_service.py
from collections import abc
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional

import pydantic
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import EmptyOrder, MissingUser, NotFound, ValidationError
from storefront.domain.pricing import PricingPolicy, compute_totals, round2
from storefront.domain.schemas import (
    Order,
    OrderItemIn,
    OrderLineItem,
    dump_billing,
    dump_items,
    load_billing,
    load_items,
)
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_SUBMITTED = "submitted"
DEFAULT_PAYMENT_METHOD = "cod"


class OrderService:
    """
    Checkout and order history.

    place_order prices every line from the catalog, whatever price the client
    sent is ignored. Clearing the ordered lines out of the cart is left to the
    caller.
    """

    def __init__(self, db: Session, policy: Optional[PricingPolicy] = None):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.policy = policy or PricingPolicy.from_settings()

    def place_order(
        self,
        user_id: int,
        items: Iterable[Any],
        shipping_address: Optional[str] = None,
        customer_name: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> Order:
        if not user_id:
            raise MissingUser()
        if isinstance(items, (str, bytes, abc.Mapping)) or not isinstance(items, abc.Iterable):
            raise EmptyOrder()
        requested = [self._parse_item(it) for it in items]
        if not requested:
            raise EmptyOrder()

        lines = self._snapshot_lines(requested)
        billing = compute_totals(lines, self.policy)

        order = OrderModel(
            user_id=user_id,
            customer_name=customer_name or "",
            shipping_address=shipping_address or "",
            products=dump_items(lines),
            billing_details=dump_billing(billing),
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            status=STATUS_SUBMITTED,
        )
        created = self.repo.create_order(order)

        logger.info(
            f"Order {created.order_id} placed by user {user_id}: "
            f"{len(lines)} line(s), total {billing.total}"
        )
        return self.to_order(created)

    def list_orders(self, user_id: Optional[int] = None) -> List[Order]:
        """Newest first. Without user_id this is the unscoped (admin) listing."""
        return [self.to_order(o) for o in self.repo.list_orders(user_id)]

    def get_order(self, order_id: int, user_id: Optional[int] = None) -> Order:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")
        if user_id is not None and order.user_id != user_id:
            raise PermissionError("No access to this order")
        return self.to_order(order)

    @staticmethod
    def to_order(row: OrderModel) -> Order:
        return Order(
            order_id=row.order_id,
            user_id=row.user_id,
            customer_name=row.customer_name or "",
            shipping_address=row.shipping_address or "",
            items=load_items(row.products),
            billing_details=load_billing(row.billing_details),
            payment_method=row.payment_method or DEFAULT_PAYMENT_METHOD,
            status=row.status or STATUS_SUBMITTED,
            order_date=_as_utc(row.order_date),
        )

    @staticmethod
    def _parse_item(item: Any) -> OrderItemIn:
        if isinstance(item, OrderItemIn):
            parsed = item
        else:
            try:
                parsed = OrderItemIn.model_validate(item)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid order item: {e.errors()[0]['msg']}") from e

        if not parsed.product_id:
            raise ValidationError("Every order item needs a product_id")
        if parsed.quantity < 1:
            raise ValidationError(f"Quantity for product {parsed.product_id} must be at least 1")
        return parsed

    def _snapshot_lines(self, requested: List[OrderItemIn]) -> List[OrderLineItem]:
        catalog = self.products.get_products(it.product_id for it in requested)

        missing = sorted({it.product_id for it in requested} - catalog.keys())
        if missing:
            raise NotFound(f"Product(s) not found: {', '.join(map(str, missing))}")

        lines = []
        for it in requested:
            product = catalog[it.product_id]
            if it.price is not None and Decimal(str(it.price)) != Decimal(str(product.price)):
                logger.warning(
                    f"Client price {it.price} for product {it.product_id} ignored, "
                    f"catalog price is {product.price}"
                )
            lines.append(
                OrderLineItem(
                    product_id=product.product_id,
                    name=product.name,
                    price=round2(Decimal(str(product.price))),
                    quantity=it.quantity,
                )
            )
        return lines


def _as_utc(value: datetime) -> datetime:
    # sqlite hands DateTime(timezone=True) back naive; stored values are UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
