"""Cart items as seen by checkout.

Checkout reads the cart once, at entry, and never mutates it. Items are value
objects: prices and quantities are locked for the whole session.
"""

from dataclasses import dataclass
from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String

from checkout.domain import checkout

UNKNOWN_SHOP_NAME = "Unknown Shop"


@checkout.value_object
class CartItem:
    """One cart line: a product, its unit price and quantity, and the seller that owns it."""

    item_id = String(required=True, max_length=255)
    product_id = String(required=True, max_length=255)
    product_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)
    seller_id = String(required=True, max_length=255)
    seller_name = String(max_length=255, default=UNKNOWN_SHOP_NAME)

    @invariant.post
    def line_total_must_match_price_and_quantity(self):
        if self.unit_price is None or self.quantity is None or self.line_total is None:
            return
        expected = Decimal(str(self.unit_price)) * self.quantity
        if abs(Decimal(str(self.line_total)) - expected) >= Decimal("0.01"):
            raise ValidationError({"line_total": ["Line total does not match unit price × quantity"]})

    @classmethod
    def from_cart_line(cls, line: dict) -> "CartItem":
        """Build an item from a raw cart line, filling in the line total when absent."""
        unit_price = float(line["price"] if "price" in line else line["unit_price"])
        quantity = int(line["quantity"])
        line_total = line.get("line_total")
        if line_total is None:
            line_total = float(Decimal(str(unit_price)) * quantity)
        return cls(
            item_id=str(line.get("id") or line.get("item_id")),
            product_id=str(line["product_id"]),
            product_name=line.get("product_name"),
            unit_price=unit_price,
            quantity=quantity,
            line_total=float(line_total),
            seller_id=str(line.get("shop_id") or line["seller_id"]),
            seller_name=line.get("shop_name") or line.get("seller_name") or UNKNOWN_SHOP_NAME,
        )

    def to_wire(self) -> dict:
        return {
            "id": self.item_id,
            "productId": self.product_id,
            "productName": self.product_name,
            "price": self.unit_price,
            "quantity": self.quantity,
            "lineTotal": self.line_total,
            "shopId": self.seller_id,
        }


@dataclass(frozen=True)
class CartSnapshot:
    """Immutable cart contents captured at checkout entry."""

    items: tuple[CartItem, ...]
    currency: str = "INR"

    @property
    def is_empty(self) -> bool:
        return not self.items
