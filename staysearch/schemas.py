# staysearch/schemas.py
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from typing import List, Literal, Optional, Tuple
from datetime import datetime
from enum import Enum

from .config import DEFAULT_PAGE_LIMIT
from .utils import split_price


class Listing(BaseModel):
    """A catalog record. Price is held as a numeric amount plus unit.

    Legacy records carrying a display string (``"price": "$350/hr"``) are
    accepted and parsed on the way in.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    location: str
    price_amount: int = Field(..., ge=0)
    currency: str = "$"
    price_unit: str = "hr"
    image: Optional[str] = None
    coordinates: Tuple[float, float]
    property_type: Optional[str] = None
    amenities: Tuple[str, ...] = ()
    max_guests: int = Field(1, ge=1)
    instant_book: bool = False
    description: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: int = Field(0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def parse_legacy_price(cls, data):
        if isinstance(data, dict) and "price_amount" not in data and data.get("price") is not None:
            data = dict(data)
            amount, currency, unit = split_price(str(data.pop("price")))
            if amount is None:
                raise ValueError("price has no digits")
            data["price_amount"] = amount
            if currency:
                data.setdefault("currency", currency)
            if unit:
                data.setdefault("price_unit", unit)
        return data

    @computed_field
    @property
    def price(self) -> str:
        return f"{self.currency}{self.price_amount}/{self.price_unit}"


class SearchFilters(BaseModel):
    query: Optional[str] = None
    location: Optional[str] = None
    # inclusive (min, max); either bound may be None for an open end
    price_range: Optional[Tuple[Optional[int], Optional[int]]] = None
    property_types: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    # minimum seating capacity the listing must offer
    min_guests: Optional[int] = None
    instant_book: Optional[bool] = None


class SortField(str, Enum):
    price = "price"
    rating = "rating"
    distance = "distance"
    name = "name"


SortOrder = Literal["asc", "desc"]


class SearchParams(BaseModel):
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    sort_by: Optional[SortField] = None
    sort_order: SortOrder = "asc"


class SearchResponse(BaseModel):
    listings: List[Listing]
    total: int
    page: int
    total_pages: int
    has_more: bool


class FilterOption(BaseModel):
    value: str
    label: str
    count: int
    selected: bool = False


class FilterGroup(BaseModel):
    id: str
    name: str
    type: Literal["checkbox", "radio", "range", "select"]
    options: List[FilterOption] = Field(default_factory=list)
    multiple: bool = False
    min: Optional[int] = None
    max: Optional[int] = None
    step: Optional[int] = None


class FilterMetadata(BaseModel):
    property_types: FilterGroup
    amenities: FilterGroup
    price_range: FilterGroup
    guest_capacity: FilterGroup
    instant_book: FilterGroup
    locations: FilterGroup


class DistributionEntry(BaseModel):
    label: str
    count: int
    percentage: int


class FilterStats(BaseModel):
    total_listings: int
    filtered_count: int
    price_distribution: List[DistributionEntry]
    property_type_distribution: List[DistributionEntry]
    amenity_distribution: List[DistributionEntry]


class Percentiles(BaseModel):
    p25: int
    p75: int
    p90: int


class PriceRangeStats(BaseModel):
    min: int
    max: int
    average: int
    median: int
    percentiles: Percentiles


class SuggestedFilters(BaseModel):
    # module-level presets are returned as-is
    model_config = ConfigDict(frozen=True)

    property_types: Tuple[str, ...] = ()
    amenities: Tuple[str, ...] = ()
    price_range: Optional[Tuple[int, int]] = None


class AISearchResponse(BaseModel):
    listings: List[Listing]
    total: int
    search_id: str
    confidence: float
    processing_time: float
    suggested_filters: Optional[SuggestedFilters] = None


class AISearchHistory(BaseModel):
    id: str
    image_name: str
    search_date: datetime
    result_count: int
    filters: SearchFilters


class ImageSuggestions(BaseModel):
    suggested_filters: SuggestedFilters
    confidence: float
