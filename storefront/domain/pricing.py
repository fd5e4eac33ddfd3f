# storefront/domain/pricing.py
"""
Order totals.

compute_totals is pure: same line items and policy, same BillingDetails.
Amounts are Decimal and rounded with ROUND_HALF_UP to 2 places, separately
for subtotal, tax and total:

    subtotal = round2(sum(price * quantity))
    shipping = 0 if subtotal == 0 or subtotal >= threshold else flat_fee
    tax      = round2(subtotal * tax_rate)
    total    = round2(subtotal + shipping + tax)

Malformed prices/quantities (missing, non-numeric, negative, NaN, above
MAX_AMOUNT) count as 0, the engine never raises on line item content.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.schemas import BillingDetails
from storefront.utils import settings

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# a single price or quantity above this counts as malformed, like "abc"
MAX_AMOUNT = Decimal("1e15")
# working precision, comfortably above any sum of in-range amounts
PRECISION = 60


class PricingPolicy(BaseModel):
    """Shipping tier and tax rate, supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    free_shipping_threshold: Decimal = Field(Decimal("1000"), ge=0)
    flat_fee: Decimal = Field(Decimal("40"), ge=0)
    tax_rate: Decimal = Field(Decimal("0.02"), ge=0)

    @classmethod
    def from_settings(cls) -> "PricingPolicy":
        return cls(
            free_shipping_threshold=Decimal(settings.FREE_SHIPPING_THRESHOLD),
            flat_fee=Decimal(settings.SHIPPING_FLAT_FEE),
            tax_rate=Decimal(settings.TAX_RATE),
        )


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_amount(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        # str() first so floats keep their printed value (0.1 -> 0.1, not 0.1000000000000000055...)
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        return ZERO
    return amount


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def compute_totals(line_items: Iterable[Any], policy: PricingPolicy) -> BillingDetails:
    with localcontext() as ctx:
        ctx.prec = PRECISION
        subtotal_raw = sum(
            (to_amount(_field(it, "price")) * to_amount(_field(it, "quantity")) for it in line_items or ()),
            Decimal("0"),
        )
        subtotal = round2(subtotal_raw)

        #nothing billable -> nothing shipped
        if subtotal == ZERO or subtotal >= policy.free_shipping_threshold:
            shipping = ZERO
        else:
            shipping = round2(policy.flat_fee)

        tax = round2(subtotal * policy.tax_rate)
        total = round2(subtotal + shipping + tax)

    return BillingDetails(subtotal=subtotal, shipping=shipping, tax=tax, total=total)
