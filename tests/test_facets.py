# tests/test_facets.py
from staysearch import facets
from staysearch.schemas import Listing, SearchFilters


def counts(group):
    return {o.value: o.count for o in group.options}


def test_full_catalog_metadata(catalog):
    meta = facets.get_filter_metadata(catalog)

    types = counts(meta.property_types)
    assert types["Beach House"] == 1
    assert types["Mountain Cabin"] == 1
    assert types["Urban Loft"] == 0

    amenities = counts(meta.amenities)
    assert amenities["WiFi"] == 8
    assert amenities["Pool"] == 4
    assert amenities["Pet Friendly"] == 0

    assert (meta.price_range.min, meta.price_range.max, meta.price_range.step) == (280, 550, 10)
    assert meta.price_range.options == []

    assert counts(meta.guest_capacity) == {"2": 8, "4": 8, "6": 8, "8": 6, "10": 3, "12": 2, "14": 1}
    assert meta.guest_capacity.options[2].label == "6+ guests"

    assert counts(meta.instant_book) == {"true": 6, "false": 2}
    assert counts(meta.locations) == {"California": 5, "Colorado": 1, "Washington": 1, "Canada": 1}


def test_options_count_the_filtered_subset(catalog):
    meta = facets.get_filter_options(catalog, SearchFilters(instant_book=False))
    types = counts(meta.property_types)
    assert types["Cabin"] == 1
    assert types["Cottage"] == 1
    assert sum(types.values()) == 2
    assert (meta.price_range.min, meta.price_range.max) == (280, 420)
    assert counts(meta.instant_book) == {"true": 0, "false": 2}


def test_selected_flags_follow_applied_filters(catalog):
    f = SearchFilters(property_types=["Cabin"], amenities=["WiFi"], min_guests=6,
                      instant_book=False, location="washington")
    meta = facets.get_filter_options(catalog, f)
    assert [o.value for o in meta.property_types.options if o.selected] == ["Cabin"]
    assert [o.value for o in meta.amenities.options if o.selected] == ["WiFi"]
    assert [o.value for o in meta.guest_capacity.options if o.selected] == ["6"]
    assert [o.value for o in meta.instant_book.options if o.selected] == ["false"]
    assert [o.value for o in meta.locations.options if o.selected] == ["Washington"]


def test_empty_result_falls_back_to_catalog_price_range(catalog):
    meta = facets.get_filter_options(catalog, SearchFilters(query="no such place"))
    assert (meta.price_range.min, meta.price_range.max) == (280, 550)
    assert all(o.count == 0 for o in meta.amenities.options)


def test_empty_catalog_uses_default_price_range():
    meta = facets.get_filter_metadata([])
    assert (meta.price_range.min, meta.price_range.max) == (0, 1000)


def test_unknown_catalog_values_join_the_vocabulary():
    catalog = [Listing(id=1, name="Tree Fort", location="PORTLAND, OR", price_amount=90,
                       coordinates=(45.5, -122.6), property_type="Treehouse", amenities=("Rope Swing",))]
    meta = facets.get_filter_metadata(catalog)
    assert counts(meta.property_types)["Treehouse"] == 1
    assert counts(meta.amenities)["Rope Swing"] == 1
    assert sum(counts(meta.locations).values()) == 0


def test_single_groups(catalog):
    group = facets.get_property_types(catalog, SearchFilters(amenities=["Beach Access"]))
    assert group.id == "propertyType"
    assert {v: c for v, c in counts(group).items() if c} == {"Beach House": 1, "Bungalow": 1}

    group = facets.get_amenities(catalog)
    assert group.multiple is True
    assert counts(group)["Hot Tub"] == 3


def test_price_range_stats(catalog):
    stats = facets.get_price_range_stats(catalog)
    assert (stats.min, stats.max) == (280, 550)
    assert stats.average == 429
    assert stats.median == 450
    assert (stats.percentiles.p25, stats.percentiles.p75, stats.percentiles.p90) == (380, 520, 550)


def test_price_range_stats_without_matches(catalog):
    stats = facets.get_price_range_stats(catalog, SearchFilters(min_guests=50))
    assert (stats.min, stats.max, stats.average, stats.median) == (0, 1000, 0, 0)
    assert stats.percentiles.p90 == 0


def test_filter_stats(catalog):
    stats = facets.get_filter_stats(catalog)
    assert (stats.total_listings, stats.filtered_count) == (8, 8)
    assert [(e.label, e.count, e.percentage) for e in stats.price_distribution] == [
        ("$0 - $200", 0, 0),
        ("$200 - $400", 3, 38),
        ("$400 - $600", 5, 63),
        ("$600+", 0, 0),
    ]
    assert len(stats.property_type_distribution) == 8
    assert all(e.percentage == 13 for e in stats.property_type_distribution)
    wifi = next(e for e in stats.amenity_distribution if e.label == "WiFi")
    assert (wifi.count, wifi.percentage) == (8, 100)
    assert all(e.count > 0 for e in stats.amenity_distribution)


def test_filter_stats_without_matches(catalog):
    stats = facets.get_filter_stats(catalog, SearchFilters(location="nowhere"))
    assert stats.total_listings == 8
    assert stats.filtered_count == 0
    assert all(e.percentage == 0 for e in stats.price_distribution)
    assert stats.property_type_distribution == []
    assert stats.amenity_distribution == []
