"""The signed-in shopper, as handed over by the session layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Shopper:
    id: str
    email: str
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
