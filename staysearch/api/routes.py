# staysearch/api/routes.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError
from typing import List, Optional, Sequence
from .. import crud, facets, schemas, services
from ..catalog import get_catalog
from ..config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..utils import logger

router = APIRouter()


def search_filters(
    q: Optional[str] = Query(None, description="Text matched against name, location and description"),
    location: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    property_type: Optional[List[str]] = Query(None),
    amenity: Optional[List[str]] = Query(None),
    min_guests: Optional[int] = Query(None, description="Listing must seat at least this many guests"),
    instant_book: Optional[bool] = Query(None),
) -> schemas.SearchFilters:
    price_range = None
    if min_price is not None or max_price is not None:
        price_range = (min_price, max_price)
    return schemas.SearchFilters(
        query=q,
        location=location,
        price_range=price_range,
        property_types=property_type or [],
        amenities=amenity or [],
        min_guests=min_guests,
        instant_book=instant_book,
    )


def search_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    sort_by: Optional[schemas.SortField] = Query(None),
    sort_order: schemas.SortOrder = Query("asc"),
) -> schemas.SearchParams:
    return schemas.SearchParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/listings", response_model=schemas.SearchResponse)
def listings(
    filters: schemas.SearchFilters = Depends(search_filters),
    params: schemas.SearchParams = Depends(search_params),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return crud.get_listings(catalog, filters, params)


@router.get("/listings/search", response_model=schemas.SearchResponse)
def search(
    q: str = Query(..., min_length=1),
    filters: schemas.SearchFilters = Depends(search_filters),
    params: schemas.SearchParams = Depends(search_params),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return crud.search_listings(catalog, q, filters, params)


@router.get("/listings/by-location/{region}", response_model=schemas.SearchResponse)
def by_location(
    region: str,
    filters: schemas.SearchFilters = Depends(search_filters),
    params: schemas.SearchParams = Depends(search_params),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return crud.get_listings_by_location(catalog, region, filters, params)


@router.get("/listings/popular-locations", response_model=List[str])
def popular_locations():
    return crud.get_popular_locations()


@router.get("/listings/{listing_id}", response_model=schemas.Listing)
def get_listing(listing_id: int, catalog: Sequence[schemas.Listing] = Depends(get_catalog)):
    obj = crud.get_listing(catalog, listing_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Listing not found")
    return obj


@router.get("/filters", response_model=schemas.FilterMetadata)
def filter_metadata(catalog: Sequence[schemas.Listing] = Depends(get_catalog)):
    return facets.get_filter_metadata(catalog)


@router.get("/filters/options", response_model=schemas.FilterMetadata)
def filter_options(
    filters: schemas.SearchFilters = Depends(search_filters),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return facets.get_filter_options(catalog, filters)


@router.get("/filters/property-types", response_model=schemas.FilterGroup)
def property_types(
    filters: schemas.SearchFilters = Depends(search_filters),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return facets.get_property_types(catalog, filters)


@router.get("/filters/amenities", response_model=schemas.FilterGroup)
def amenities(
    filters: schemas.SearchFilters = Depends(search_filters),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return facets.get_amenities(catalog, filters)


@router.get("/filters/price-stats", response_model=schemas.PriceRangeStats)
def price_stats(
    filters: schemas.SearchFilters = Depends(search_filters),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return facets.get_price_range_stats(catalog, filters)


@router.get("/filters/stats", response_model=schemas.FilterStats)
def filter_stats(
    filters: schemas.SearchFilters = Depends(search_filters),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
):
    return facets.get_filter_stats(catalog, filters)


@router.post("/ai-search", response_model=schemas.AISearchResponse)
def ai_search(
    image: UploadFile = File(...),
    filters: str = Form("{}", description="JSON-encoded search filters"),
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
    store: services.SearchHistoryStore = Depends(services.get_history_store),
):
    try:
        parsed = schemas.SearchFilters.model_validate_json(filters)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    try:
        return services.search_by_image(catalog, store, image.filename or "upload", parsed)
    except Exception as e:
        logger.exception("AI search failed: %s", e)
        raise HTTPException(status_code=500, detail="AI search failed")


@router.post("/ai-search/suggestions", response_model=schemas.ImageSuggestions)
def ai_suggestions(image: UploadFile = File(...)):
    logger.info("Image suggestions requested for %s", image.filename)
    return services.get_image_suggestions()


@router.get("/ai-search/history", response_model=List[schemas.AISearchHistory])
def ai_history(store: services.SearchHistoryStore = Depends(services.get_history_store)):
    return store.list()


@router.get("/ai-search/{search_id}", response_model=schemas.AISearchResponse)
def ai_search_result(
    search_id: str,
    catalog: Sequence[schemas.Listing] = Depends(get_catalog),
    store: services.SearchHistoryStore = Depends(services.get_history_store),
):
    res = services.get_search_result(catalog, store, search_id)
    if res is None:
        raise HTTPException(status_code=404, detail="Search not found")
    return res


@router.delete("/ai-search/{search_id}")
def delete_ai_search(
    search_id: str,
    store: services.SearchHistoryStore = Depends(services.get_history_store),
):
    if not services.delete_search_history(store, search_id):
        raise HTTPException(status_code=404, detail="Search not found")
    return {"status": "deleted"}
