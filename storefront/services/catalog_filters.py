"""
Faceted filtering for category pages.

A category page lists the products of one category and, next to the listing,
a count per option of every filter group (price range, colour tone, finish,
thickness, size, piece count, pack size). Each group's counts are taken over
the variations matching every *other* active filter, so selecting an option
never collapses its own group to a single non-zero entry.

Everything here works on products that are already loaded; nothing in this
module touches storage.
"""
import math
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront.core.exceptions import BadRequestError
from storefront.domain.models.catalog import COLOR_TONES, SIZES, THICKNESSES, Product, Variation


@dataclass(frozen=True)
class PriceRange:
    """A price bucket, lower bound inclusive and upper bound exclusive."""

    label: str
    minimum: float
    maximum: float

    def contains(self, price: float) -> bool:
        return self.minimum <= price < self.maximum


PRICE_RANGES: Tuple[PriceRange, ...] = (
    PriceRange("0-200", 0, 200),
    PriceRange("200-300", 200, 300),
    PriceRange("300-500", 300, 500),
    PriceRange("500-1000", 500, 1000),
    PriceRange("1000-2000", 1000, 2000),
)

# Filter groups in the order they are reported, keyed by their query/response name
DIMENSIONS: Tuple[str, ...] = ("price", "colorTone", "finish", "thickness", "size", "pcs", "packSize")

# Variation attribute backing each non-price dimension
_VARIATION_ATTRS = {
    "colorTone": "color_tone",
    "finish": "finish",
    "thickness": "thickness",
    "size": "size",
    "pcs": "pcs",
    "packSize": "pack_size",
}

# Groups whose options are always listed, even with a zero count
_FIXED_OPTIONS = {
    "colorTone": COLOR_TONES,
    "thickness": THICKNESSES,
    "size": SIZES,
}


def format_number(value: Any) -> str:
    """Render a numeric option key without float noise ("4", "1.44")."""
    return format(Decimal(str(value)).normalize(), "f")


def _parse_price(raw: str) -> Tuple[float, float]:
    parts = raw.split("-")
    if len(parts) != 2:
        raise BadRequestError(f"Invalid price range '{raw}', expected 'min-max'", field="price")
    try:
        low, high = float(parts[0]), float(parts[1])
    except ValueError:
        raise BadRequestError(f"Invalid price range '{raw}', expected 'min-max'", field="price")
    if math.isnan(low) or math.isnan(high) or low > high:
        raise BadRequestError(f"Invalid price range '{raw}'", field="price")
    return low, high


def _parse_number(raw: str, name: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise BadRequestError(f"Invalid {name} value '{raw}'", field=name)
    if math.isnan(value) or math.isinf(value):
        raise BadRequestError(f"Invalid {name} value '{raw}'", field=name)
    return value


def _clean(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


@dataclass(frozen=True)
class FilterCriteria:
    """Active filters of a category page request. ``None`` means not filtered."""

    price: Optional[Tuple[float, float]] = None
    colorTone: Optional[str] = None
    finish: Optional[str] = None
    thickness: Optional[str] = None
    size: Optional[str] = None
    pcs: Optional[float] = None
    packSize: Optional[float] = None

    @classmethod
    def from_query(
        cls,
        price: Optional[str] = None,
        color_tone: Optional[str] = None,
        finish: Optional[str] = None,
        thickness: Optional[str] = None,
        size: Optional[str] = None,
        pcs: Optional[str] = None,
        pack_size: Optional[str] = None,
    ) -> "FilterCriteria":
        """
        Build criteria from raw query-string values.

        Blank values are ignored. Text filters are trimmed and matched exactly.

        Raises:
            BadRequestError: If the price range or a numeric filter is malformed
        """
        price = _clean(price)
        pcs = _clean(pcs)
        pack_size = _clean(pack_size)
        return cls(
            price=_parse_price(price) if price else None,
            colorTone=_clean(color_tone),
            finish=_clean(finish),
            thickness=_clean(thickness),
            size=_clean(size),
            pcs=_parse_number(pcs, "pcs") if pcs else None,
            packSize=_parse_number(pack_size, "packSize") if pack_size else None,
        )

    def active(self) -> Dict[str, Any]:
        """Active filters keyed by dimension."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def without(self, dimension: str) -> "FilterCriteria":
        """The same criteria with one dimension cleared."""
        return replace(self, **{dimension: None})

    def matches(self, variation: Variation) -> bool:
        """True when the variation satisfies every active filter."""
        return all(_matches(dimension, wanted, variation) for dimension, wanted in self.active().items())


def _matches(dimension: str, wanted: Any, variation: Variation) -> bool:
    if dimension == "price":
        low, high = wanted
        return variation.price is not None and low <= variation.price <= high

    value = getattr(variation, _VARIATION_ATTRS[dimension])
    if value is None:
        return False
    if dimension in ("pcs", "packSize"):
        return math.isclose(float(value), float(wanted))
    return value == wanted


@dataclass
class MatchedProduct:
    """A product together with the variations that passed the filters."""

    product: Product
    variations: List[Variation] = field(default_factory=list)


def filter_products(products: List[Product], criteria: FilterCriteria) -> List[MatchedProduct]:
    """
    Keep the products having at least one matching variation.

    Args:
        products: Category products in listing order
        criteria: Filters to apply

    Returns:
        Matching products, in the same order, each with its matching variations only
    """
    matched = []
    for product in products:
        variations = [v for v in product.variations if criteria.matches(v)]
        if variations:
            matched.append(MatchedProduct(product=product, variations=variations))
    return matched


def empty_filter_counts() -> Dict[str, Dict[str, int]]:
    """Counts skeleton with every fixed option present at zero."""
    counts: Dict[str, Dict[str, int]] = {dimension: {} for dimension in DIMENSIONS}
    counts["price"] = {r.label: 0 for r in PRICE_RANGES}
    for dimension, options in _FIXED_OPTIONS.items():
        counts[dimension] = {option: 0 for option in options}
    return counts


def _tally(dimension: str, variation: Variation, bucket: Dict[str, int]) -> None:
    if dimension == "price":
        if variation.price is None:
            return
        for price_range in PRICE_RANGES:
            if price_range.contains(variation.price):
                bucket[price_range.label] += 1
                break
        return

    value = getattr(variation, _VARIATION_ATTRS[dimension])
    if not value:
        return
    if dimension in _FIXED_OPTIONS:
        if value in bucket:
            bucket[value] += 1
        return

    key = format_number(value) if dimension in ("pcs", "packSize") else value
    bucket[key] = bucket.get(key, 0) + 1


def compute_filter_counts(products: List[Product], criteria: FilterCriteria) -> Dict[str, Dict[str, int]]:
    """
    Count variations per filter option, excluding each group's own filter.

    For every dimension the products are re-filtered with all active filters
    except that dimension, and each surviving variation adds one to the
    option it falls in. Price variations are bucketed into ``PRICE_RANGES``;
    colour tone, thickness and size only count known options; finish, piece
    count and pack size list whatever values occur.

    Args:
        products: All products of the category, with all their variations
        criteria: Active filters of the request

    Returns:
        Mapping of dimension name to option counts
    """
    counts = empty_filter_counts()
    active = criteria.active()

    # With no filter on a dimension, its subset is the fully-filtered one
    fully_filtered = filter_products(products, criteria)

    for dimension in DIMENSIONS:
        if dimension in active:
            subset = filter_products(products, criteria.without(dimension))
        else:
            subset = fully_filtered
        for matched in subset:
            for variation in matched.variations:
                _tally(dimension, variation, counts[dimension])

    return counts
