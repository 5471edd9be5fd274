"""Cart snapshot reader port and an in-memory implementation.

The cart service owns the cart; checkout only reads it once, at entry.
"""

from abc import ABC, abstractmethod

from checkout.cart.items import CartItem, CartSnapshot


class CartReader(ABC):
    """Abstract source of the shopper's current cart."""

    @abstractmethod
    async def read(self, shopper_id: str) -> CartSnapshot:
        """Return the shopper's cart as an immutable snapshot."""
        ...


class InMemoryCartReader(CartReader):
    """Cart reader backed by a dict of raw cart lines per shopper."""

    def __init__(self, carts: dict[str, list[dict]] | None = None, currency: str = "INR") -> None:
        self.carts: dict[str, list[dict]] = dict(carts or {})
        self.currency = currency
        self.reads: list[str] = []

    def put(self, shopper_id: str, lines: list[dict]) -> None:
        self.carts[shopper_id] = list(lines)

    async def read(self, shopper_id: str) -> CartSnapshot:
        self.reads.append(shopper_id)
        lines = self.carts.get(shopper_id, [])
        return CartSnapshot(
            items=tuple(CartItem.from_cart_line(line) for line in lines),
            currency=self.currency,
        )
