"""
Pricing for product variations.

Pricing model:
- A variation has a base `price`, an optional `salePrice` and an optional
  `salePriceExpiresAt`. Variations may instead carry the sale in `price`
  and the base in `originalPrice`.
- The sale is active when the sale price is positive and below the base
  price, and the expiry is either unset or still in the future.
- A present but unparseable expiry never activates a sale.
- A product with several variations and no selection is displayed as the
  range [min(current price), max(current price)].

Nothing here is persisted; pricing is resolved fresh on every read.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class VariationPricing:
    current_price: Decimal
    original_price: Decimal
    sale_active: bool

    @property
    def discount_percent(self) -> int:
        """Whole-number saving shown next to a struck-through original price."""
        if not self.sale_active or self.original_price <= 0:
            return 0
        saving = (self.original_price - self.current_price) / self.original_price * 100
        return int(saving.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PriceRange:
    min_price: Decimal
    max_price: Decimal
    sale_active: bool = False

    @property
    def is_range(self) -> bool:
        return self.min_price != self.max_price


def to_money(value: Any) -> Optional[Decimal]:
    """Parse a price-like value into a two-place Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        # str() first so floats don't drag their binary error along
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_expiry(value: Any) -> Tuple[Optional[datetime], bool]:
    """
    Parse a sale expiry.

    Returns `(expiry, ok)`. `(None, True)` means "no expiry", while
    `(None, False)` means a value was supplied but could not be understood.
    Accepts datetimes, ISO-8601 strings (a trailing 'Z' included) and epoch
    milliseconds.
    """
    if value is None:
        return None, True
    if isinstance(value, str) and not value.strip():
        return None, True
    if isinstance(value, datetime):
        return ensure_utc(value), True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc), True
        except (OverflowError, OSError, ValueError):
            return None, False
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text)), True
        except ValueError:
            return None, False
    return None, False


def _field(variation: Any, *names: str) -> Any:
    for name in names:
        if isinstance(variation, Mapping):
            if name in variation:
                return variation[name]
        elif hasattr(variation, name):
            return getattr(variation, name)
    return None


def _sale_and_base(variation: Any) -> Tuple[Decimal, Optional[Decimal]]:
    """
    `(base_price, sale_price)` of a variation.

    Two shapes are stored: `price` with a separate `salePrice`, or the sale
    in `price` with the base in `originalPrice`.
    """
    price = to_money(_field(variation, "price"))
    original = to_money(_field(variation, "originalPrice", "original_price"))
    if original is not None and price is not None and original > price:
        return original, price
    sale_price = to_money(_field(variation, "salePrice", "sale_price"))
    return price or ZERO, sale_price


def is_sale_active(variation: Any, now: Optional[datetime] = None) -> bool:
    base_price, sale_price = _sale_and_base(variation)
    if sale_price is None or not 0 < sale_price < base_price:
        return False

    raw_expiry = _field(variation, "salePriceExpiresAt", "sale_price_expires_at")
    expiry, ok = parse_expiry(raw_expiry)
    if not ok:
        logger.warning(
            f"Ignoring sale price of variation {_field(variation, 'name')!r}: "
            f"unparseable expiry {raw_expiry!r}"
        )
        return False
    if expiry is None:
        return True

    now = ensure_utc(now) if now else datetime.now(timezone.utc)
    return expiry > now


def resolve_variation_pricing(
    variation: Any, now: Optional[datetime] = None
) -> VariationPricing:
    """Effective price of a single product option."""
    base_price, sale_price = _sale_and_base(variation)

    if is_sale_active(variation, now):
        return VariationPricing(
            current_price=sale_price,
            original_price=base_price,
            sale_active=True,
        )

    return VariationPricing(
        current_price=base_price,
        original_price=base_price,
        sale_active=False,
    )


def resolve_price_range(
    variations: Iterable[Any], now: Optional[datetime] = None
) -> Optional[PriceRange]:
    """Display range across all variations, None when there are none."""
    pricings = [resolve_variation_pricing(v, now) for v in variations]
    if not pricings:
        return None
    current_prices = [p.current_price for p in pricings]
    return PriceRange(
        min_price=min(current_prices),
        max_price=max(current_prices),
        sale_active=any(p.sale_active for p in pricings),
    )


def parse_variations(raw: Any) -> Optional[List[dict]]:
    """
    Decode the JSON-encoded variations column.

    Malformed JSON or a value that is not a list yields None instead of
    raising; entries that are not objects are dropped.
    """
    if raw is None:
        return None
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Malformed variations JSON, treating product as having none")
            return None
    if not isinstance(raw, list):
        logger.warning(f"Variations payload is a {type(raw).__name__}, expected a list")
        return None
    return [v for v in raw if isinstance(v, dict)]


def find_variation(variations: Iterable[dict], name: Optional[str]) -> Optional[dict]:
    """Case-insensitive lookup of a variation by name."""
    if not name or not name.strip():
        return None
    wanted = name.strip().lower()
    for variation in variations:
        candidate = variation.get("name")
        if isinstance(candidate, str) and candidate.strip().lower() == wanted:
            return variation
    return None


def resolve_product_pricing(
    product: Any,
    selected_variation: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[Optional[VariationPricing], PriceRange]:
    """
    Pricing for a product as a whole.

    Returns the pricing of the selected variation (None when nothing is
    selected or the product has no variations) together with the display
    range. Products without variations use their own price, with the list
    price as the struck-through original when it is higher.
    """
    variations = parse_variations(getattr(product, "variations", None)) or []

    if variations:
        price_range = resolve_price_range(variations, now)
        selected = find_variation(variations, selected_variation)
        pricing = resolve_variation_pricing(selected, now) if selected else None
        return pricing, price_range

    price = to_money(getattr(product, "price", None)) or ZERO
    list_price = to_money(getattr(product, "list_price", None))
    on_sale = list_price is not None and list_price > price
    pricing = VariationPricing(
        current_price=price,
        original_price=list_price if on_sale else price,
        sale_active=on_sale,
    )
    return pricing, PriceRange(min_price=price, max_price=price, sale_active=on_sale)
