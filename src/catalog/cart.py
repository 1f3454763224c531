from __future__ import annotations

from typing import Callable, Dict, List, Optional

from db.models import CartLine, Product
from utils.logger import get_logger

_logger = get_logger(__name__)


class Cart:
    """
    In-memory shopping cart: product id -> quantity.

    Stock comes from `lookup` (normally CatalogLoader.get). Quantities never
    exceed the known stock, and a line that drops to zero is removed.
    The cart is not persisted.
    """

    def __init__(self, lookup: Callable[[int], Optional[Product]]) -> None:
        self._lookup = lookup
        self._lines: Dict[int, int] = {}

    def _stock(self, pid: int) -> int:
        product = self._lookup(pid)
        return product.stock if product else 0

    def add_to_cart(self, pid: int, delta: int = 1) -> None:
        """Add `delta` units (negative removes). No-op for sold-out products."""
        stock = self._stock(pid)
        if stock <= 0:
            _logger.debug(f"Refusing to add product {pid}: out of stock.")
            return

        new_qty = min(self._lines.get(pid, 0) + delta, stock)
        if new_qty <= 0:
            self._lines.pop(pid, None)
        else:
            self._lines[pid] = new_qty

    def set_quantity(self, pid: int, qty: int) -> None:
        """Set a line's quantity, capped at stock. Zero removes the line."""
        if qty < 0:
            raise ValueError("Quantity cannot be negative.")
        qty = min(qty, self._stock(pid))
        if qty == 0:
            self._lines.pop(pid, None)
        else:
            self._lines[pid] = qty

    def get_item_quantity(self, pid: int) -> int:
        return self._lines.get(pid, 0)

    def remove(self, pid: int) -> None:
        self._lines.pop(pid, None)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> List[CartLine]:
        return [CartLine(pid=pid, qty=qty) for pid, qty in self._lines.items()]

    @property
    def total_items(self) -> int:
        return sum(self._lines.values())

    def total_price(self) -> float:
        """Cart value at current catalog prices; unknown products count as 0."""
        total = 0.0
        for pid, qty in self._lines.items():
            product = self._lookup(pid)
            if product:
                total += product.price * qty
        return round(total, 2)
