# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# per line, cart or order; keeps totals and the integer columns in range
MAX_QUANTITY = 10_000


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# cart
# ---------------------------------------------------------------------------
# ids are optional on purpose: a missing id has to come back from the
# service as a 400, not as a framework 422


class CartAddIn(BaseModel):
    """Schema for adding a product to the cart."""

    user_id: Optional[int] = None
    product_id: Optional[int] = None
    quantity: int = Field(1, description="Added to the current quantity, floored at 1")


class CartUpdateIn(BaseModel):
    """Schema for overwriting a line quantity."""

    user_id: Optional[int] = None
    product_id: Optional[int] = None
    quantity: Optional[int] = None


class CartAdjustIn(BaseModel):
    """Schema for the +/- buttons, relative change."""

    user_id: Optional[int] = None
    product_id: Optional[int] = None
    delta: int = 0


class CartRemoveManyIn(BaseModel):
    user_id: Optional[int] = None
    product_ids: List[int] = Field(default_factory=list)


class CartRemoveManyOut(MessageOut):
    removed: List[int]
    failed: List[int]


class CartLineOut(BaseModel):
    """Cart line joined with the current product data."""

    product_id: int
    quantity: int
    name: str
    price: Decimal
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# favorites / products
# ---------------------------------------------------------------------------


class FavoriteIn(BaseModel):
    user_id: Optional[int] = None
    product_id: Optional[int] = None


class FavoriteRemoveIn(BaseModel):
    user_id: Optional[int] = None


class ProductOut(BaseModel):
    product_id: int
    name: str
    price: Decimal
    category: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# orders
# ---------------------------------------------------------------------------


class OrderItemIn(BaseModel):
    """
    Line item as sent by the storefront. Only product_id and quantity are
    used, name/price are whatever the client had on screen and get ignored.
    """

    model_config = ConfigDict(extra="ignore")

    product_id: Optional[int] = None
    quantity: int = Field(1, le=MAX_QUANTITY)
    name: Optional[str] = None
    price: Optional[Decimal] = None


class OrderCreate(BaseModel):
    user_id: Optional[int] = None
    # validated item by item in OrderService, so a bad list is a 400 and not a 422
    items: Optional[Any] = None
    shipping_address: Optional[str] = None
    customer_name: Optional[str] = None
    payment_method: Optional[str] = None


class OrderLineItem(BaseModel):
    """Snapshot of a product at checkout, never updated afterwards."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    product_id: int
    name: str = ""
    price: Decimal
    quantity: int

    @model_validator(mode="before")
    @classmethod
    def _legacy_defaults(cls, data: Any) -> Any:
        # old rows: price may be missing, quantity missing or stored as qty
        if isinstance(data, dict):
            data = dict(data)
            if data.get("price") is None:
                data["price"] = Decimal("0")
            if data.get("quantity") is None:
                data["quantity"] = data.get("qty") if data.get("qty") is not None else 1
            if data.get("name") is None:
                data["name"] = ""
        return data


class BillingDetails(BaseModel):
    """
    subtotal/shipping/tax/total, stored as computed at checkout.
    shipping defaults to 0 for rows written before it was recorded.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    subtotal: Decimal
    shipping: Decimal = Decimal("0.00")
    tax: Decimal
    total: Decimal

    @field_validator("shipping", mode="before")
    @classmethod
    def _shipping_null_is_zero(cls, value: Any) -> Any:
        return Decimal("0.00") if value is None else value


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: int
    user_id: int
    customer_name: str
    shipping_address: str
    items: List[OrderLineItem]
    billing_details: Optional[BillingDetails] = None
    payment_method: str
    status: str
    order_date: datetime


class OrderPlacedOut(MessageOut):
    order: Order


# ---------------------------------------------------------------------------
# JSON column boundary
# ---------------------------------------------------------------------------

_ITEMS = TypeAdapter(List[OrderLineItem])
_RAW_LIST = TypeAdapter(List[Any])
_BILLING = TypeAdapter(BillingDetails)


def dump_items(items: List[OrderLineItem]) -> str:
    return _ITEMS.dump_json(items).decode()


def dump_billing(billing: BillingDetails) -> str:
    return _BILLING.dump_json(billing).decode()


def _validate(adapter: TypeAdapter, raw: Any):
    if isinstance(raw, (str, bytes)):
        return adapter.validate_json(raw)
    return adapter.validate_python(raw)


def load_items(raw: Any) -> List[OrderLineItem]:
    """Line by line: an unreadable line is skipped, the rest of the order stays."""
    if raw is None:
        return []
    try:
        entries = _validate(_RAW_LIST, raw)
    except (pydantic.ValidationError, ValueError, TypeError) as e:
        logger.warning(f"Unreadable order items, falling back to []: {e}")
        return []

    items = []
    for entry in entries:
        try:
            items.append(OrderLineItem.model_validate(entry))
        except (pydantic.ValidationError, ValueError, TypeError) as e:
            logger.warning(f"Skipping unreadable order line {entry!r}: {e}")
    return items


def load_billing(raw: Any) -> Optional[BillingDetails]:
    if raw is None:
        return None
    try:
        return _validate(_BILLING, raw)
    except (pydantic.ValidationError, ValueError, TypeError) as e:
        logger.warning(f"Unreadable billing details, falling back to None: {e}")
        return None
