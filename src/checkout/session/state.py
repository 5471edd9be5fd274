"""Checkout state — one explicit, serializable value.

The state is never mutated in place. Every change goes through a function in
``checkout.session.transitions`` that returns a new ``CheckoutState``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from checkout.pricing.coupons import AppliedCoupon


class CheckoutStep(Enum):
    ADDRESS = "address"
    PAYMENT = "payment"
    REVIEW = "review"


class PaymentMethod(Enum):
    GATEWAY = "gateway"
    COD = "cod"


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class CheckoutState:
    step: CheckoutStep = CheckoutStep.ADDRESS
    shipping_address_id: str | None = None
    billing_address_id: str | None = None
    billing_same_as_shipping: bool = True
    payment_method: PaymentMethod | None = PaymentMethod.GATEWAY
    coupons: Mapping[str, AppliedCoupon] = field(default_factory=dict)
    notes: str = ""
    processing: bool = False
    validation_errors: Mapping[str, str] = field(default_factory=dict)
    error: str | None = None

    def __post_init__(self):
        # Read-only views; transitions build fresh dicts
        object.__setattr__(self, "coupons", _frozen(self.coupons))
        object.__setattr__(self, "validation_errors", _frozen(self.validation_errors))

    @property
    def effective_billing_address_id(self) -> str | None:
        if self.billing_same_as_shipping:
            return self.shipping_address_id
        return self.billing_address_id

    def to_dict(self) -> dict:
        return {
            "step": self.step.value,
            "shipping_address_id": self.shipping_address_id,
            "billing_address_id": self.billing_address_id,
            "billing_same_as_shipping": self.billing_same_as_shipping,
            "payment_method": self.payment_method.value if self.payment_method else None,
            "coupons": {
                seller_id: {"code": coupon.code, "discount_amount": coupon.discount_amount}
                for seller_id, coupon in self.coupons.items()
            },
            "notes": self.notes,
            "processing": self.processing,
            "validation_errors": dict(self.validation_errors),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CheckoutState":
        payment_method = data.get("payment_method", PaymentMethod.GATEWAY.value)
        return cls(
            step=CheckoutStep(data.get("step", CheckoutStep.ADDRESS.value)),
            shipping_address_id=data.get("shipping_address_id"),
            billing_address_id=data.get("billing_address_id"),
            billing_same_as_shipping=data.get("billing_same_as_shipping", True),
            payment_method=PaymentMethod(payment_method) if payment_method else None,
            coupons={
                seller_id: AppliedCoupon(code=coupon["code"], discount_amount=coupon["discount_amount"])
                for seller_id, coupon in (data.get("coupons") or {}).items()
            },
            notes=data.get("notes", ""),
            processing=data.get("processing", False),
            validation_errors=data.get("validation_errors") or {},
            error=data.get("error"),
        )
