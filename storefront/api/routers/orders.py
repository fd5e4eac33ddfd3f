# storefront/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.pricing import PricingPolicy
from storefront.domain.schemas import Order, OrderCreate, OrderPlacedOut
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def get_policy(request: Request) -> PricingPolicy:
    return request.app.state.pricing_policy


def get_service(db: Session, policy: PricingPolicy):
    return OrderService(db, policy=policy)


@router.post("", response_model=OrderPlacedOut, status_code=201)
@router.post("/", response_model=OrderPlacedOut, status_code=201, include_in_schema=False)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    policy: PricingPolicy = Depends(get_policy),
):
    """
    Places the order with catalog prices, then takes the ordered
    products out of the user's cart (best effort, never fails the order).
    """
    svc = get_service(db, policy)
    try:
        order = svc.place_order(
            user_id=payload.user_id,
            items=payload.items,
            shipping_address=payload.shipping_address,
            customer_name=payload.customer_name,
            payment_method=payload.payment_method,
        )
    except StorefrontError as e:
        raise to_http(e)

    _, failed = CartService(db).remove_many(order.user_id, [i.product_id for i in order.items])
    if failed:
        logger.warning(f"Order {order.order_id}: products {failed} left in cart of user {order.user_id}")

    return {"message": "Order placed successfully", "order": order}


@router.get("", response_model=List[Order])
@router.get("/", response_model=List[Order], include_in_schema=False)
def list_orders(
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    policy: PricingPolicy = Depends(get_policy),
):
    svc = get_service(db, policy)
    try:
        return svc.list_orders(user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: int,
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    policy: PricingPolicy = Depends(get_policy),
):
    svc = get_service(db, policy)
    try:
        return svc.get_order(order_id, user_id)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)
