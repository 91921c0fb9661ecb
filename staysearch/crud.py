# staysearch/crud.py
"""Read-side query operations over the listing catalog.

Filtering, sorting and pagination are pure functions over a sequence of
`Listing` records; `get_listings` chains them into one search call.
"""
import math
from typing import List, Optional, Sequence

from .schemas import Listing, SearchFilters, SearchParams, SearchResponse

POPULAR_LOCATIONS = [
    "Los Angeles, California",
    "New York, New York",
    "Miami, Florida",
    "Austin, Texas",
]


def _matches(listing: Listing, filters: SearchFilters) -> bool:
    if filters.query:
        q = filters.query.lower()
        if not (
            q in listing.name.lower()
            or q in listing.location.lower()
            or (listing.description and q in listing.description.lower())
        ):
            return False

    if filters.location and filters.location.lower() not in listing.location.lower():
        return False

    if filters.price_range:
        lo, hi = filters.price_range
        if lo is not None and listing.price_amount < lo:
            return False
        if hi is not None and listing.price_amount > hi:
            return False

    if filters.property_types and listing.property_type not in filters.property_types:
        return False

    if filters.amenities and not set(filters.amenities).issubset(listing.amenities):
        return False

    # zero or negative guest counts place no constraint
    if filters.min_guests is not None and filters.min_guests > 0 and listing.max_guests < filters.min_guests:
        return False

    if filters.instant_book is not None and listing.instant_book != filters.instant_book:
        return False

    return True


def filter_listings(listings: Sequence[Listing], filters: Optional[SearchFilters] = None) -> List[Listing]:
    """Keep listings passing every set filter, in catalog order."""
    if filters is None:
        return list(listings)
    return [l for l in listings if _matches(l, filters)]


_SORT_KEYS = {
    "price": lambda l: l.price_amount,
    "rating": lambda l: l.rating or 0,
    "name": lambda l: l.name.lower(),
}


def sort_listings(listings: Sequence[Listing], sort_by: Optional[str] = None, sort_order: str = "asc") -> List[Listing]:
    """Stable sort on one field; unknown or missing keys leave the order alone."""
    key = _SORT_KEYS.get(sort_by) if sort_by else None
    if key is None:
        return list(listings)
    return sorted(listings, key=key, reverse=(sort_order == "desc"))


def paginate(listings: Sequence[Listing], page: int = 1, limit: int = 20) -> SearchResponse:
    # page and limit below 1 are clamped rather than rejected
    page = max(page, 1)
    limit = max(limit, 1)
    start = (page - 1) * limit
    end = start + limit
    total = len(listings)
    return SearchResponse(
        listings=list(listings[start:end]),
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
        has_more=end < total,
    )


def get_listings(
    catalog: Sequence[Listing],
    filters: Optional[SearchFilters] = None,
    params: Optional[SearchParams] = None,
) -> SearchResponse:
    params = params or SearchParams()
    matched = filter_listings(catalog, filters)
    ordered = sort_listings(matched, params.sort_by, params.sort_order)
    return paginate(ordered, params.page, params.limit)


def search_listings(
    catalog: Sequence[Listing],
    query: str,
    filters: Optional[SearchFilters] = None,
    params: Optional[SearchParams] = None,
) -> SearchResponse:
    filters = (filters or SearchFilters()).model_copy(update={"query": query})
    return get_listings(catalog, filters, params)


def get_listings_by_location(
    catalog: Sequence[Listing],
    location: str,
    filters: Optional[SearchFilters] = None,
    params: Optional[SearchParams] = None,
) -> SearchResponse:
    filters = (filters or SearchFilters()).model_copy(update={"location": location})
    return get_listings(catalog, filters, params)


def get_listing(catalog: Sequence[Listing], listing_id: int) -> Optional[Listing]:
    return next((l for l in catalog if l.id == listing_id), None)


def get_popular_locations() -> List[str]:
    return list(POPULAR_LOCATIONS)
