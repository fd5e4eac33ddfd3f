# storefront/api/routers/cart.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CartAddIn,
    CartAdjustIn,
    CartLineOut,
    CartRemoveManyIn,
    CartRemoveManyOut,
    CartUpdateIn,
    MessageOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("/add", response_model=MessageOut)
def add_to_cart(payload: CartAddIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.add_item(payload.user_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Added to cart"}


@router.post("/update", response_model=MessageOut)
def update_quantity(payload: CartUpdateIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.set_quantity(payload.user_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Quantity updated"}


@router.post("/adjust", response_model=MessageOut)
def adjust_quantity(payload: CartAdjustIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.adjust_quantity(payload.user_id, payload.product_id, payload.delta)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Quantity updated"}


@router.post("/remove-many", response_model=CartRemoveManyOut)
def remove_many(payload: CartRemoveManyIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        removed, failed = svc.remove_many(payload.user_id, payload.product_ids)
    except StorefrontError as e:
        raise to_http(e)
    message = "Items removed" if not failed else "Some items could not be removed"
    return {"message": message, "removed": removed, "failed": failed}


@router.delete("/clear/{user_id}", response_model=MessageOut)
def clear_cart(user_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.clear(user_id)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Cart cleared"}


@router.get("/{user_id}", response_model=List[CartLineOut])
def get_cart(user_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_cart(user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{user_id}/{product_id}", response_model=MessageOut)
def remove_item(user_id: int, product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.remove_item(user_id, product_id)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Item removed"}
