"""In-progress order cart."""

from __future__ import annotations

from foodstand.models import CartLine, CatalogItem


class Cart:
    """Unsaved selection of catalog items keyed by item id, in insertion order."""

    def __init__(self) -> None:
        self._lines: dict[str, CartLine] = {}

    def add(self, item: CatalogItem) -> None:
        line = self._lines.get(item.item_id)
        if line is None:
            self._lines[item.item_id] = CartLine(item=item, quantity=1)
            return
        line.quantity += 1

    def remove(self, item: CatalogItem) -> None:
        """Decrement the line for ``item``; a line that reaches zero is dropped."""
        line = self._lines.get(item.item_id)
        if line is None:
            return
        if line.quantity <= 1:
            del self._lines[item.item_id]
            return
        line.quantity -= 1

    def clear(self) -> None:
        self._lines.clear()

    def quantity_of(self, item: CatalogItem) -> int:
        line = self._lines.get(item.item_id)
        return line.quantity if line is not None else 0

    def lines(self) -> list[CartLine]:
        """Return copies of the current lines."""
        return [CartLine(item=line.item, quantity=line.quantity) for line in self._lines.values()]

    def total(self) -> int:
        return sum(line.item.unit_price * line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)
