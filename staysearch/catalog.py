# staysearch/catalog.py
"""Catalog provider.

The catalog is loaded once per process and handed to routes through the
`get_catalog` dependency. It is an immutable tuple of frozen `Listing`
records; nothing in the service mutates it after load.
"""
import json
from functools import lru_cache
from typing import Optional, Tuple

from .config import CATALOG_PATH
from .schemas import Listing
from .utils import logger

SAMPLE_LISTINGS = [
    {
        "id": 1,
        "name": "Alpine Lodge Getaway",
        "location": "WHISTLER, CANADA",
        "price_amount": 350,
        "image": "/images/logo.png",
        "coordinates": (50.1163, -122.9574),
        "property_type": "Mountain Cabin",
        "amenities": ("WiFi", "Kitchen", "Fireplace", "Hot Tub"),
        "max_guests": 8,
        "instant_book": True,
        "description": "Cozy mountain retreat with stunning alpine views",
        "rating": 4.8,
        "review_count": 127,
    },
    {
        "id": 2,
        "name": "Coastal Paradise Retreat",
        "location": "MALIBU, CALIFORNIA",
        "price_amount": 450,
        "image": "/images/logo.png",
        "coordinates": (34.0259, -118.7798),
        "property_type": "Beach House",
        "amenities": ("WiFi", "Kitchen", "Pool", "Beach Access", "Parking"),
        "max_guests": 12,
        "instant_book": True,
        "description": "Luxurious beachfront property with ocean views",
        "rating": 4.9,
        "review_count": 89,
    },
    {
        "id": 3,
        "name": "Rainforest Cabin Experience",
        "location": "OLYMPIC PENINSULA, WA",
        "price_amount": 280,
        "image": "/images/logo.png",
        "coordinates": (47.7511, -120.7401),
        "property_type": "Cabin",
        "amenities": ("WiFi", "Kitchen", "Fireplace", "Hiking Trails"),
        "max_guests": 6,
        "instant_book": False,
        "description": "Secluded cabin surrounded by ancient rainforest",
        "rating": 4.7,
        "review_count": 156,
    },
    {
        "id": 4,
        "name": "Mountain View Estate",
        "location": "ASPEN, COLORADO",
        "price_amount": 520,
        "image": "/images/logo.png",
        "coordinates": (39.1911, -106.8175),
        "property_type": "Mountain Villa",
        "amenities": ("WiFi", "Kitchen", "Pool", "Hot Tub", "Ski Access"),
        "max_guests": 10,
        "instant_book": True,
        "description": "Luxury mountain estate with ski-in/ski-out access",
        "rating": 4.9,
        "review_count": 203,
    },
    {
        "id": 5,
        "name": "Desert Oasis Villa",
        "location": "PALM SPRINGS, CA",
        "price_amount": 380,
        "image": "/images/logo.png",
        "coordinates": (33.8303, -116.5453),
        "property_type": "Desert Villa",
        "amenities": ("WiFi", "Kitchen", "Pool", "Hot Tub", "Golf Course"),
        "max_guests": 8,
        "instant_book": True,
        "description": "Modern desert villa with mountain and golf course views",
        "rating": 4.6,
        "review_count": 94,
    },
    {
        "id": 6,
        "name": "Lakeside Cottage",
        "location": "LAKE TAHOE, CA",
        "price_amount": 420,
        "image": "/images/logo.png",
        "coordinates": (39.0968, -120.0324),
        "property_type": "Cottage",
        "amenities": ("WiFi", "Kitchen", "Lake Access", "Kayaks", "BBQ"),
        "max_guests": 6,
        "instant_book": False,
        "description": "Charming cottage with direct lake access",
        "rating": 4.8,
        "review_count": 178,
    },
    {
        "id": 7,
        "name": "Vineyard Manor",
        "location": "NAPA VALLEY, CA",
        "price_amount": 480,
        "image": "/images/logo.png",
        "coordinates": (38.2975, -122.2869),
        "property_type": "Manor",
        "amenities": ("WiFi", "Kitchen", "Wine Cellar", "Vineyard Tours", "Pool"),
        "max_guests": 14,
        "instant_book": True,
        "description": "Elegant manor surrounded by vineyards",
        "rating": 4.9,
        "review_count": 145,
    },
    {
        "id": 8,
        "name": "Beachfront Bungalow",
        "location": "SANTA BARBARA, CA",
        "price_amount": 550,
        "image": "/images/logo.png",
        "coordinates": (34.4208, -119.6982),
        "property_type": "Bungalow",
        "amenities": ("WiFi", "Kitchen", "Beach Access", "Surfboards", "Outdoor Shower"),
        "max_guests": 8,
        "instant_book": True,
        "description": "Charming beachfront bungalow with surf access",
        "rating": 4.7,
        "review_count": 112,
    },
]


def load_catalog(path: Optional[str] = None) -> Tuple[Listing, ...]:
    """Build the catalog from `path` (or CATALOG_PATH), else the built-in fixture.

    Raises RuntimeError when the file cannot be read and ValueError when a
    record is invalid or an id repeats.
    """
    path = path or CATALOG_PATH
    if path:
        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise RuntimeError(f"Failed loading catalog from {path}: {e}") from e
        if not isinstance(raw, list):
            raise ValueError(f"Catalog {path} must hold a JSON array of listings")
        source = path
    else:
        raw = SAMPLE_LISTINGS
        source = "built-in fixture"

    listings = tuple(Listing.model_validate(item) for item in raw)
    seen = set()
    for listing in listings:
        if listing.id in seen:
            raise ValueError(f"Duplicate listing id {listing.id} in catalog")
        seen.add(listing.id)

    logger.info("Loaded %d listings from %s", len(listings), source)
    return listings


@lru_cache(maxsize=1)
def get_catalog() -> Tuple[Listing, ...]:
    return load_catalog()
