# staysearch/facets.py
"""Facet counts and distribution stats for the filter UI.

Every count is taken over the listings that pass the currently applied
filters, never over a paginated page. Each facet does its own pass over
that set, which is fine for catalogs of this size.
"""
import math
from typing import Iterable, List, Optional, Sequence

from .crud import filter_listings
from .schemas import (
    DistributionEntry,
    FilterGroup,
    FilterMetadata,
    FilterOption,
    FilterStats,
    Listing,
    Percentiles,
    PriceRangeStats,
    SearchFilters,
)

PROPERTY_TYPES = [
    "Beach House",
    "Mountain Cabin",
    "Urban Loft",
    "Country Villa",
    "Lakeside Cottage",
    "Desert Oasis",
    "Cabin",
    "Mountain Villa",
    "Desert Villa",
    "Cottage",
    "Manor",
    "Bungalow",
]

AMENITIES = [
    "WiFi",
    "Kitchen",
    "Parking",
    "Pool",
    "Hot Tub",
    "Fireplace",
    "Air Conditioning",
    "Pet Friendly",
    "Beach Access",
    "Hiking Trails",
    "Ski Access",
    "Golf Course",
    "Lake Access",
    "Kayaks",
    "BBQ",
    "Wine Cellar",
    "Vineyard Tours",
    "Surfboards",
    "Outdoor Shower",
]

GUEST_THRESHOLDS = (2, 4, 6, 8, 10, 12, 14)

# bucket label -> region suffixes (the part after the last comma) it covers.
# Matching the suffix against aliases lets ", CA" labels count as California
# and keeps "WA" from matching inside other words, so buckets never overlap.
LOCATION_BUCKETS = [
    ("California", {"CALIFORNIA", "CA"}),
    ("Colorado", {"COLORADO", "CO"}),
    ("Washington", {"WASHINGTON", "WA"}),
    ("Canada", {"CANADA"}),
]

# (lower inclusive, upper exclusive or None, label)
PRICE_BUCKETS = [
    (0, 200, "$0 - $200"),
    (200, 400, "$200 - $400"),
    (400, 600, "$400 - $600"),
    (600, None, "$600+"),
]

FALLBACK_PRICE_RANGE = (0, 1000)
PRICE_STEP = 10


def _vocabulary(known: List[str], seen: Iterable[str]) -> List[str]:
    """Known values first, then anything else the catalog carries."""
    extras = sorted({v for v in seen if v and v not in known})
    return known + extras


def _region(listing: Listing) -> str:
    return listing.location.rsplit(",", 1)[-1].strip().upper()


def _percentage(count: int, total: int) -> int:
    if not total:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


def _property_type_group(catalog, matched, filters) -> FilterGroup:
    types = _vocabulary(PROPERTY_TYPES, (l.property_type for l in catalog))
    return FilterGroup(
        id="propertyType",
        name="Property Type",
        type="checkbox",
        multiple=True,
        options=[
            FilterOption(
                value=t,
                label=t,
                count=sum(1 for l in matched if l.property_type == t),
                selected=t in filters.property_types,
            )
            for t in types
        ],
    )


def _amenity_group(catalog, matched, filters) -> FilterGroup:
    names = _vocabulary(AMENITIES, (a for l in catalog for a in l.amenities))
    return FilterGroup(
        id="amenities",
        name="Amenities",
        type="checkbox",
        multiple=True,
        options=[
            FilterOption(
                value=a,
                label=a,
                count=sum(1 for l in matched if a in l.amenities),
                selected=a in filters.amenities,
            )
            for a in names
        ],
    )


def _price_group(catalog, matched) -> FilterGroup:
    prices = [l.price_amount for l in matched] or [l.price_amount for l in catalog]
    lo, hi = (min(prices), max(prices)) if prices else FALLBACK_PRICE_RANGE
    return FilterGroup(
        id="priceRange",
        name="Price Range",
        type="range",
        min=lo,
        max=hi,
        step=PRICE_STEP,
    )


def _guest_group(matched, filters) -> FilterGroup:
    return FilterGroup(
        id="guestCapacity",
        name="Guest Capacity",
        type="select",
        options=[
            FilterOption(
                value=str(n),
                label=f"{n}+ guests",
                count=sum(1 for l in matched if l.max_guests >= n),
                selected=filters.min_guests == n,
            )
            for n in GUEST_THRESHOLDS
        ],
    )


def _instant_book_group(matched, filters) -> FilterGroup:
    available = sum(1 for l in matched if l.instant_book)
    return FilterGroup(
        id="instantBook",
        name="Instant Book",
        type="checkbox",
        options=[
            FilterOption(value="true", label="Available", count=available,
                         selected=filters.instant_book is True),
            FilterOption(value="false", label="Not Available", count=len(matched) - available,
                         selected=filters.instant_book is False),
        ],
    )


def _location_group(matched, filters) -> FilterGroup:
    chosen = (filters.location or "").strip().lower()
    return FilterGroup(
        id="locations",
        name="Popular Locations",
        type="select",
        options=[
            FilterOption(
                value=label,
                label=label,
                count=sum(1 for l in matched if _region(l) in regions),
                selected=chosen == label.lower(),
            )
            for label, regions in LOCATION_BUCKETS
        ],
    )


def compute_facet_counts(catalog: Sequence[Listing], filters: Optional[SearchFilters] = None) -> FilterMetadata:
    filters = filters or SearchFilters()
    matched = filter_listings(catalog, filters)
    return FilterMetadata(
        property_types=_property_type_group(catalog, matched, filters),
        amenities=_amenity_group(catalog, matched, filters),
        price_range=_price_group(catalog, matched),
        guest_capacity=_guest_group(matched, filters),
        instant_book=_instant_book_group(matched, filters),
        locations=_location_group(matched, filters),
    )


def get_filter_metadata(catalog: Sequence[Listing]) -> FilterMetadata:
    return compute_facet_counts(catalog)


def get_filter_options(catalog: Sequence[Listing], filters: Optional[SearchFilters] = None) -> FilterMetadata:
    return compute_facet_counts(catalog, filters)


def get_property_types(catalog: Sequence[Listing], filters: Optional[SearchFilters] = None) -> FilterGroup:
    filters = filters or SearchFilters()
    return _property_type_group(catalog, filter_listings(catalog, filters), filters)


def get_amenities(catalog: Sequence[Listing], filters: Optional[SearchFilters] = None) -> FilterGroup:
    filters = filters or SearchFilters()
    return _amenity_group(catalog, filter_listings(catalog, filters), filters)


def get_price_range_stats(catalog: Sequence[Listing], filters: Optional[SearchFilters] = None) -> PriceRangeStats:
    """Min, max, rounded mean, median and upper/lower percentiles of price.

    Percentiles pick the element at ``floor(n * q)`` of the sorted prices;
    no interpolation.
    """
    prices = sorted(l.price_amount for l in filter_listings(catalog, filters))
    if not prices:
        lo, hi = FALLBACK_PRICE_RANGE
        return PriceRangeStats(min=lo, max=hi, average=0, median=0,
                               percentiles=Percentiles(p25=0, p75=0, p90=0))

    n = len(prices)
    return PriceRangeStats(
        min=prices[0],
        max=prices[-1],
        average=int(math.floor(sum(prices) / n + 0.5)),
        median=prices[n // 2],
        percentiles=Percentiles(
            p25=prices[int(n * 0.25)],
            p75=prices[int(n * 0.75)],
            p90=prices[int(n * 0.9)],
        ),
    )


def get_filter_stats(catalog: Sequence[Listing], filters: Optional[SearchFilters] = None) -> FilterStats:
    matched = filter_listings(catalog, filters)
    total = len(matched)

    price_distribution = []
    for lo, hi, label in PRICE_BUCKETS:
        count = sum(1 for l in matched if l.price_amount >= lo and (hi is None or l.price_amount < hi))
        price_distribution.append(DistributionEntry(label=label, count=count, percentage=_percentage(count, total)))

    type_distribution = []
    for t in _vocabulary(PROPERTY_TYPES, (l.property_type for l in catalog)):
        count = sum(1 for l in matched if l.property_type == t)
        if count:
            type_distribution.append(DistributionEntry(label=t, count=count, percentage=_percentage(count, total)))

    amenity_distribution = []
    for a in _vocabulary(AMENITIES, (a for l in catalog for a in l.amenities)):
        count = sum(1 for l in matched if a in l.amenities)
        if count:
            amenity_distribution.append(DistributionEntry(label=a, count=count, percentage=_percentage(count, total)))

    return FilterStats(
        total_listings=len(catalog),
        filtered_count=total,
        price_distribution=price_distribution,
        property_type_distribution=type_distribution,
        amenity_distribution=amenity_distribution,
    )
