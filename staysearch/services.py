# staysearch/services.py
"""Simulated AI photo search.

No image analysis happens here: a photo search applies a fixed set of
suggested filters on top of the caller's filters and reports a random
confidence score. Past searches are kept in a bounded history store.
"""
import random
import threading
import time
from collections import deque
from datetime import datetime, timezone
from itertools import count
from typing import List, Optional, Sequence

from . import crud
from .config import AI_HISTORY_SIZE
from .schemas import (
    AISearchHistory,
    AISearchResponse,
    ImageSuggestions,
    Listing,
    SearchFilters,
    SuggestedFilters,
)
from .utils import logger

PHOTO_SEARCH_FILTERS = SuggestedFilters(
    property_types=["Beach House", "Mountain Cabin"],
    amenities=["Pool", "Hot Tub", "Kitchen"],
    price_range=(300, 600),
)

CANNED_SUGGESTIONS = [
    SuggestedFilters(
        property_types=["Beach House", "Coastal Villa"],
        amenities=["Beach Access", "Pool", "Ocean View"],
        price_range=(400, 800),
    ),
    SuggestedFilters(
        property_types=["Mountain Cabin", "Ski Chalet"],
        amenities=["Fireplace", "Hot Tub", "Mountain View"],
        price_range=(300, 600),
    ),
    SuggestedFilters(
        property_types=["Urban Loft", "City Apartment"],
        amenities=["WiFi", "Kitchen", "City View"],
        price_range=(200, 500),
    ),
    SuggestedFilters(
        property_types=["Desert Villa", "Oasis Retreat"],
        amenities=["Pool", "Hot Tub", "Desert View"],
        price_range=(350, 700),
    ),
]

# confidence reported when a stored search is replayed
REPLAY_CONFIDENCE = 0.85


class SearchHistoryStore:
    """Thread-safe, newest-first history of photo searches.

    Holds at most `capacity` entries; adding to a full store evicts the
    oldest entry.
    """

    def __init__(self, capacity: int = AI_HISTORY_SIZE):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._items = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._counter = count(1)

    def next_id(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"search_{int(time.time() * 1000)}_{n}"

    def add(self, item: AISearchHistory) -> None:
        with self._lock:
            if len(self._items) == self.capacity:
                logger.debug("History full, evicting %s", self._items[-1].id)
            self._items.appendleft(item)

    def list(self) -> List[AISearchHistory]:
        with self._lock:
            return list(self._items)

    def get(self, search_id: str) -> Optional[AISearchHistory]:
        with self._lock:
            return next((i for i in self._items if i.id == search_id), None)

    def delete(self, search_id: str) -> bool:
        with self._lock:
            for item in self._items:
                if item.id == search_id:
                    self._items.remove(item)
                    return True
        return False

    def __len__(self):
        with self._lock:
            return len(self._items)


history_store = SearchHistoryStore()


def get_history_store() -> SearchHistoryStore:
    return history_store


def _apply_suggestions(filters: SearchFilters, suggested: SuggestedFilters) -> SearchFilters:
    return filters.model_copy(update={
        "property_types": list(suggested.property_types),
        "amenities": list(suggested.amenities),
        "price_range": suggested.price_range,
    })


def search_by_image(
    catalog: Sequence[Listing],
    store: SearchHistoryStore,
    image_name: str,
    filters: Optional[SearchFilters] = None,
    rng: Optional[random.Random] = None,
) -> AISearchResponse:
    rng = rng or random.Random()
    started = time.perf_counter()
    filters = filters or SearchFilters()

    search_id = store.next_id()
    result = crud.get_listings(catalog, _apply_suggestions(filters, PHOTO_SEARCH_FILTERS))
    confidence = 0.85 + rng.random() * 0.1

    store.add(AISearchHistory(
        id=search_id,
        image_name=image_name,
        search_date=datetime.now(timezone.utc),
        result_count=result.total,
        # a copy, so later edits to the caller's object don't change what gets replayed
        filters=filters.model_copy(deep=True),
    ))
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("Photo search %s for %s matched %d listings", search_id, image_name, result.total)

    return AISearchResponse(
        listings=result.listings,
        total=result.total,
        search_id=search_id,
        confidence=confidence,
        processing_time=elapsed_ms,
        suggested_filters=PHOTO_SEARCH_FILTERS,
    )


def get_search_result(
    catalog: Sequence[Listing],
    store: SearchHistoryStore,
    search_id: str,
) -> Optional[AISearchResponse]:
    """Replay a stored search with the filters the caller first sent."""
    item = store.get(search_id)
    if item is None:
        return None
    started = time.perf_counter()
    result = crud.get_listings(catalog, item.filters)
    return AISearchResponse(
        listings=result.listings,
        total=result.total,
        search_id=search_id,
        confidence=REPLAY_CONFIDENCE,
        processing_time=(time.perf_counter() - started) * 1000,
    )


def delete_search_history(store: SearchHistoryStore, search_id: str) -> bool:
    return store.delete(search_id)


def get_image_suggestions(rng: Optional[random.Random] = None) -> ImageSuggestions:
    rng = rng or random.Random()
    return ImageSuggestions(
        suggested_filters=rng.choice(CANNED_SUGGESTIONS),
        confidence=0.7 + rng.random() * 0.2,
    )
