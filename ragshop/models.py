"""Domain models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    """A catalogue product."""

    id: str
    name: str
    description: str
    price: float
    price_currency: str
    supply_ability: int
    minimum_order: int

    def to_embedding_input(self) -> str:
        """Describe the product as text suitable for embedding."""
        return (
            f"{self.name}. {self.description}. "
            f"The price is {self.price:.2f} {self.price_currency}. "
            f"Minimum order: {self.minimum_order} units. "
            f"Supply ability: {self.supply_ability} units."
        )