# app/services/promotions/cart_items.py
"""
Normalization of loosely-shaped cart entries.

Carts arrive from the storefront in several shapes (`productId`, `product`,
`id`; category as an id, a name or an embedded object...). Everything past
this module works on `CartItemView` only.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from app.services.pricing.variation_pricing import to_money


@dataclass(frozen=True)
class CartItemView:
    product_id: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None  # lower-cased
    selected_variation: Optional[str] = None  # trimmed, lower-cased
    price: Optional[Decimal] = None
    quantity: int = 1

    @property
    def line_subtotal(self) -> Optional[Decimal]:
        if self.price is None:
            return None
        return self.price * self.quantity


def _get(raw: Any, key: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def _first(raw: Any, *keys: str) -> Any:
    for key in keys:
        value = _get(raw, key)
        if value is not None and value != "":
            return value
    return None


def _clean(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _identifier(value: Any) -> Optional[str]:
    """An id given directly or as an embedded object ({id} / {_id})."""
    if isinstance(value, Mapping) or (value is not None and hasattr(value, "id")):
        return _clean(_first(value, "id", "_id"))
    return _clean(value)


def _name(value: Any) -> Optional[str]:
    if isinstance(value, Mapping) or (value is not None and hasattr(value, "name")):
        return _clean(_get(value, "name"))
    return _clean(value)


def _quantity(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 1
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 1


def normalize_cart_item(raw: Any) -> CartItemView:
    product_id = _identifier(_first(raw, "productId", "product_id", "product", "id"))

    category = _get(raw, "category")
    category_id = _clean(_first(raw, "categoryId", "category_id"))
    category_name = _clean(_first(raw, "categoryName", "category_name"))
    if category is not None:
        if isinstance(category, Mapping) or hasattr(category, "name"):
            category_id = category_id or _identifier(category)
            category_name = category_name or _name(category)
        else:
            # A bare string is the legacy category name
            category_name = category_name or _clean(category)

    variation = _name(
        _first(raw, "selectedVariation", "selected_variation", "variation", "variationName")
    )

    return CartItemView(
        product_id=product_id,
        category_id=category_id,
        category_name=category_name.lower() if category_name else None,
        selected_variation=variation.lower() if variation else None,
        price=to_money(_first(raw, "price", "unitPrice")),
        quantity=_quantity(_first(raw, "quantity", "qty")),
    )


def normalize_cart_items(raw_items: Optional[Iterable[Any]]) -> List[CartItemView]:
    if not raw_items:
        return []
    return [normalize_cart_item(item) for item in raw_items if item is not None]


def cart_subtotal(items: Iterable[CartItemView]) -> Decimal:
    """Sum of price x quantity over the lines that carry a price."""
    return sum(
        (item.line_subtotal for item in items if item.line_subtotal is not None),
        Decimal("0.00"),
    )
