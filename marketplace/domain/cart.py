"""
Cart domain object.

A cart is never persisted: the client keeps it and submits its lines at
checkout, where they are rebuilt from server-side prices. The one rule the
cart owns is payment-style homogeneity: every line of a non-empty cart shares
the same payment style.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


class MixedPaymentStyleError(ValueError):
    """Raised when a line's payment style differs from the cart's."""

    def __init__(self, cart_style: str, item_style: str):
        self.cart_style = cart_style
        self.item_style = item_style
        super().__init__(f"Cannot add a {item_style} item to a {cart_style} cart")


@dataclass
class CartLine:
    product_id: str
    seller_id: str
    price_id: str
    payment_style: str
    unit_price: int
    quantity: int = 1
    name: str = ""
    image: str = ""
    stripe_price_id: Optional[str] = None
    currency: str = "usd"

    @property
    def key(self):
        return (self.product_id, self.price_id)

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    lines: List[CartLine] = field(default_factory=list)

    @property
    def payment_style(self) -> Optional[str]:
        return self.lines[0].payment_style if self.lines else None

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def add(self, line: CartLine) -> CartLine:
        """
        Add a line, merging with an existing line for the same product and price.

        Raises:
            MixedPaymentStyleError: The cart is non-empty and holds another style.
                The cart is left unchanged.
        """
        if self.lines and line.payment_style != self.payment_style:
            raise MixedPaymentStyleError(self.payment_style, line.payment_style)

        for existing in self.lines:
            if existing.key == line.key:
                existing.quantity += line.quantity
                return existing

        self.lines.append(line)
        return line

    def remove(self, product_id: str, price_id: str) -> bool:
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.key != (product_id, price_id)]
        return len(self.lines) != before

    def by_seller(self) -> Dict[str, List[CartLine]]:
        """Partition lines by seller, preserving first-seen seller order."""
        partitions: Dict[str, List[CartLine]] = {}
        for line in self.lines:
            partitions.setdefault(line.seller_id, []).append(line)
        return partitions

    @property
    def total(self) -> int:
        return sum(line.subtotal for line in self.lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)
