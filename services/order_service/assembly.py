"""
Order assembly: turns a direct-purchase product or a list of cart items
into priced order lines and a total.

Products and cart items arrive either as mappings (decoded JSON) or as
objects with attributes. A cart item may wrap its product under a
``product`` key or carry the product fields itself.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

from services.product_service.schemas import quantize_money

ZERO = Decimal("0")


def _field(source: Any, name: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _first(source: Any, *names: str) -> Any:
    for name in names:
        value = _field(source, name)
        if value:
            return value
    return None


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return number if number.is_finite() else ZERO


def product_price(product: Any) -> Decimal:
    """Unit price of a product; strings are parsed, anything unusable is 0."""
    return _to_decimal(_first(product, "price", "deal_price", "dealPrice"))


def _quantity(value: Any) -> int:
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        return 1
    return quantity or 1


@dataclass
class OrderLine:
    product_id: Optional[str]
    product_name: str
    unit_price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_payload(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "price": str(quantize_money(self.unit_price)),
            "quantity": self.quantity,
        }


def _line(product: Any, quantity: Any) -> OrderLine:
    product_id = _first(product, "product_id", "id")
    return OrderLine(
        product_id=None if product_id is None else str(product_id),
        product_name=str(_first(product, "name", "product_name", "title") or ""),
        unit_price=product_price(product),
        quantity=_quantity(quantity),
    )


def order_lines(product: Any = None, cart_items: Iterable[Any] = ()) -> List[OrderLine]:
    """A direct purchase is one unit of the product; otherwise one line per cart item."""
    if product is not None:
        return [_line(product, 1)]
    return [
        _line(_field(item, "product") or item, _field(item, "quantity"))
        for item in cart_items
    ]


def order_total(lines: Iterable[OrderLine]) -> Decimal:
    return quantize_money(sum((line.subtotal for line in lines), ZERO))
