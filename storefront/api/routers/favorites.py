# storefront/api/routers/favorites.py
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import FavoriteIn, FavoriteRemoveIn, MessageOut, ProductOut
from storefront.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])


def get_service(db: Session):
    return FavoriteService(db)


@router.post("", response_model=MessageOut, status_code=201)
@router.post("/", response_model=MessageOut, status_code=201, include_in_schema=False)
def add_favorite(payload: FavoriteIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.add(payload.user_id, payload.product_id)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Added to favorites"}


@router.delete("/{product_id}", response_model=MessageOut)
def remove_favorite(
    product_id: int,
    payload: Optional[FavoriteRemoveIn] = Body(None),
    user_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """user_id comes in the body (storefront) or as ?user_id= (clients that can't send DELETE bodies)."""
    svc = get_service(db)
    uid = payload.user_id if payload and payload.user_id else user_id
    try:
        svc.remove(uid, product_id)
    except StorefrontError as e:
        raise to_http(e)
    return {"message": "Removed from favorites"}


@router.get("/{user_id}", response_model=List[ProductOut])
def list_favorites(user_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_favorites(user_id)
    except StorefrontError as e:
        raise to_http(e)
