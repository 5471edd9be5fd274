"""Address provider port.

Checkout only needs to know an address id was picked; the address book
resolves ids to display data for the review summary.
"""

from abc import ABC, abstractmethod

from protean.fields import String

from checkout.domain import checkout


@checkout.value_object
class Address:
    """Display data for a saved address."""

    full_name = String(max_length=255)
    phone = String(max_length=20)
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


class AddressProvider(ABC):
    @abstractmethod
    def resolve(self, address_id: str) -> Address | None:
        """Return the address for an id, or None when it is unknown."""
        ...


class InMemoryAddressBook(AddressProvider):
    def __init__(self, addresses: dict[str, Address] | None = None) -> None:
        self.addresses: dict[str, Address] = dict(addresses or {})

    def add(self, address_id: str, address: Address) -> None:
        self.addresses[address_id] = address

    def resolve(self, address_id: str) -> Address | None:
        return self.addresses.get(address_id)
