"""Seller partitioning — one order draft per seller in the cart."""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal

from checkout.cart.items import CartItem
from checkout.pricing.coupons import AppliedCoupon


@dataclass(frozen=True)
class SellerOrderDraft:
    """The slice of a cart owned by one seller, priced and couponed on its own."""

    seller_id: str
    seller_name: str
    items: tuple[CartItem, ...]
    coupon: AppliedCoupon | None = None

    @property
    def subtotal(self) -> Decimal:
        return sum((Decimal(str(item.line_total)) for item in self.items), Decimal("0"))

    def with_coupon(self, coupon: AppliedCoupon | None) -> "SellerOrderDraft":
        return replace(self, coupon=coupon)


def partition(cart_items: Iterable[CartItem]) -> list[SellerOrderDraft]:
    """Group cart items by seller.

    Sellers appear in the order they first show up in the cart and items keep
    their cart order inside each group. An empty cart gives an empty list.
    """
    groups: dict[str, list[CartItem]] = {}
    names: dict[str, str] = {}
    for item in cart_items:
        if item.seller_id not in groups:
            groups[item.seller_id] = []
            names[item.seller_id] = item.seller_name
        groups[item.seller_id].append(item)

    return [
        SellerOrderDraft(seller_id=seller_id, seller_name=names[seller_id], items=tuple(items))
        for seller_id, items in groups.items()
    ]


def attach_coupons(drafts: Iterable[SellerOrderDraft], coupons: dict[str, AppliedCoupon]) -> list[SellerOrderDraft]:
    """Return the drafts with each seller's coupon (or none) attached."""
    return [draft.with_coupon(coupons.get(draft.seller_id)) for draft in drafts]
