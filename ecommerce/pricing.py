# ecommerce/pricing.py
"""
Checkout arithmetic over the backend cart.

The backend computes what each coupon or reward is worth; this module only
adds those reductions up for display and for the order/payment payloads.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from django.conf import settings

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
COUPON_CODE_LENGTH = 6

FIXED = "fixed"
PERCENT_TYPES = ("percent", "percentage")


def to_decimal(value: Any) -> Decimal:
    """Backend numbers arrive as ints, floats or strings; bad input counts as 0."""
    if value is None or value == "":
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    product_id: Any
    name: str
    image: Optional[str]
    quantity: int
    price: Decimal
    original_price: Decimal
    has_sizes: bool = False
    selected_size: Optional[str] = None

    @classmethod
    def from_backend(cls, item: dict) -> "CartLine":
        product = item.get("product") or {}
        try:
            quantity = int(item.get("quantity") or 0)
        except (TypeError, ValueError):
            quantity = 0
        return cls(
            product_id=product.get("id"),
            name=product.get("name", ""),
            image=product.get("image"),
            quantity=max(quantity, 0),
            price=to_decimal(item.get("price")),
            original_price=to_decimal(product.get("originalPrice", item.get("price"))),
            has_sizes=bool(item.get("has_sizes")),
            selected_size=item.get("selected_size") or None,
        )

    @property
    def total(self) -> Decimal:
        return money(self.price * self.quantity)


@dataclass
class AppliedCoupon:
    code: str
    discount_type: str
    discount_value: Decimal

    @classmethod
    def from_session(cls, raw: dict) -> "AppliedCoupon":
        return cls(
            code=raw.get("code", ""),
            discount_type=(raw.get("discount_type") or "").lower(),
            discount_value=to_decimal(raw.get("discount_value")),
        )

    def to_session(self) -> dict:
        return {
            "code": self.code,
            "discount_type": self.discount_type,
            "discount_value": str(self.discount_value),
        }

    def discount_on(self, subtotal: Decimal) -> Decimal:
        if self.discount_type == FIXED:
            return self.discount_value
        if self.discount_type in PERCENT_TYPES:
            return subtotal * self.discount_value / Decimal(100)
        return ZERO


@dataclass
class CheckoutTotals:
    lines: list = field(default_factory=list)
    subtotal: Decimal = ZERO
    shipping: Decimal = ZERO
    tax: Decimal = ZERO
    amount: Decimal = ZERO
    coupon_discount: Decimal = ZERO
    reward_discount: Decimal = ZERO
    total: Decimal = ZERO

    @property
    def total_before_reward(self) -> Decimal:
        return max(money(self.amount - self.coupon_discount), ZERO)


def shipping_for(lines: list) -> Decimal:
    if not lines:
        return ZERO
    return money(to_decimal(getattr(settings, "SHIPPING_FLAT", "60")))


def compute_totals(
    cart_items: Iterable[dict],
    coupons: Iterable[dict] = (),
    reward_discount: Any = None,
) -> CheckoutTotals:
    """
    subtotal = sum(quantity * price)
    amount   = subtotal + shipping (+ tax, always 0)
    total    = max(amount - coupon discounts - reward discount, 0)
    Percent coupons apply to the subtotal, never to shipping.
    """
    lines = [CartLine.from_backend(item) for item in cart_items or []]
    subtotal = money(sum((line.total for line in lines), ZERO))
    shipping = shipping_for(lines)
    tax = ZERO
    amount = subtotal + shipping + tax

    coupon_discount = money(sum(
        (AppliedCoupon.from_session(c).discount_on(subtotal) for c in coupons or []),
        ZERO,
    ))
    reward = money(to_decimal(reward_discount))
    total = max(money(amount - coupon_discount - reward), ZERO)

    return CheckoutTotals(
        lines=lines,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        amount=amount,
        coupon_discount=coupon_discount,
        reward_discount=reward,
        total=total,
    )


def coupon_code_error(code: str, applied: Iterable[dict]) -> Optional[str]:
    """Checks done before asking the backend to verify a code."""
    if len(code) != COUPON_CODE_LENGTH:
        return f"Enter {COUPON_CODE_LENGTH} digit code"
    if any(c.get("code") == code for c in applied):
        return "This coupon is already applied."
    return None


def _line_payload(line: CartLine) -> dict:
    return {
        "productID": line.product_id,
        "productName": line.name,
        "productImage": line.image,
        "quantity": line.quantity,
        "price": float(line.original_price),
        "has_sizes": line.has_sizes,
        "selected_size": line.selected_size,
    }


def order_payload(billing: dict, totals: CheckoutTotals, coupons: Iterable[dict], reward_points: Any) -> dict:
    """Body for order/createOrder/ (cash on delivery)."""
    return {
        "billing_details": billing,
        "cart_items": [_line_payload(line) for line in totals.lines],
        "tax_amount": float(totals.tax),
        "amount": float(totals.amount),
        "total_amount": float(totals.total),
        "coupon_codes": [c.get("code") for c in coupons],
        "rewardPoints": reward_points or "",
    }


def wallet_payload(billing: dict, totals: CheckoutTotals, coupons: Iterable[dict], reward_points: Any) -> dict:
    """Body for payment/initKhalti/ and payment/initEsewa/."""
    return {
        "billingDetails": billing,
        "cart": [_line_payload(line) for line in totals.lines],
        "totalAmount": float(totals.total),
        "coupon_codes": [c.get("code") for c in coupons],
        "rewardPoints": reward_points or "",
    }
