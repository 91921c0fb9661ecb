# tests/test_routes.py
def ids(payload):
    return [l["id"] for l in payload["listings"]]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_listings_default(client):
    body = client.get("/listings").json()
    assert body["total"] == 8
    assert body["total_pages"] == 1
    assert body["has_more"] is False
    assert body["listings"][0]["price"] == "$350/hr"


def test_listings_pagination(client):
    body = client.get("/listings", params={"page": 2, "limit": 3}).json()
    assert ids(body) == [4, 5, 6]
    assert (body["total"], body["page"], body["total_pages"], body["has_more"]) == (8, 2, 3, True)


def test_listings_filters(client):
    assert client.get("/listings", params={"property_type": "Beach House"}).json()["total"] == 1
    body = client.get("/listings", params={"min_price": 400, "max_price": 500}).json()
    assert ids(body) == [2, 6, 7]
    body = client.get("/listings", params={"amenity": ["Pool", "Hot Tub"]}).json()
    assert ids(body) == [4, 5]
    body = client.get("/listings", params={"instant_book": "false", "min_guests": 6}).json()
    assert ids(body) == [3, 6]


def test_listings_sorting(client):
    body = client.get("/listings", params={"sort_by": "rating", "sort_order": "desc"}).json()
    assert ids(body)[:3] == [2, 4, 7]
    body = client.get("/listings", params={"sort_by": "distance"}).json()
    assert ids(body) == [1, 2, 3, 4, 5, 6, 7, 8]


def test_listings_rejects_bad_paging(client):
    assert client.get("/listings", params={"page": 0}).status_code == 422
    assert client.get("/listings", params={"limit": 0}).status_code == 422
    assert client.get("/listings", params={"limit": 10_000}).status_code == 422
    assert client.get("/listings", params={"sort_by": "popularity"}).status_code == 422


def test_search(client):
    body = client.get("/listings/search", params={"q": "beach"}).json()
    assert ids(body) == [2, 8]
    assert client.get("/listings/search").status_code == 422


def test_popular_locations(client):
    assert "Miami, Florida" in client.get("/listings/popular-locations").json()


def test_get_listing(client):
    r = client.get("/listings/7")
    assert r.status_code == 200
    assert r.json()["name"] == "Vineyard Manor"
    assert r.json()["amenities"][2] == "Wine Cellar"


def test_get_listing_not_found(client):
    r = client.get("/listings/999")
    assert r.status_code == 404
    assert r.json()["detail"] == "Listing not found"


def test_filter_metadata(client):
    body = client.get("/filters").json()
    instant = {o["value"]: o["count"] for o in body["instant_book"]["options"]}
    assert instant == {"true": 6, "false": 2}
    assert body["price_range"]["min"] == 280


def test_filter_options(client):
    body = client.get("/filters/options", params={"instant_book": "false"}).json()
    types = {o["value"]: o["count"] for o in body["property_types"]["options"] if o["count"]}
    assert types == {"Cabin": 1, "Cottage": 1}


def test_filter_groups_and_stats(client):
    assert client.get("/filters/property-types").json()["id"] == "propertyType"
    assert client.get("/filters/amenities").json()["id"] == "amenities"
    stats = client.get("/filters/price-stats").json()
    assert (stats["min"], stats["max"], stats["median"]) == (280, 550, 450)
    body = client.get("/filters/stats", params={"location": "ca"}).json()
    assert body["total_listings"] == 8
    assert body["filtered_count"] == 6


def test_ai_search_roundtrip(client, history):
    r = client.post(
        "/ai-search",
        files={"image": ("lake.jpg", b"\xff\xd8fake", "image/jpeg")},
        data={"filters": '{"instant_book": false}'},
    )
    assert r.status_code == 200
    search_id = r.json()["search_id"]
    assert r.json()["suggested_filters"]["price_range"] == [300, 600]

    hist = client.get("/ai-search/history").json()
    assert [h["id"] for h in hist] == [search_id]
    assert hist[0]["image_name"] == "lake.jpg"

    replay = client.get(f"/ai-search/{search_id}").json()
    assert ids(replay) == [3, 6]

    assert client.delete(f"/ai-search/{search_id}").json() == {"status": "deleted"}
    assert client.get(f"/ai-search/{search_id}").status_code == 404
    assert client.delete(f"/ai-search/{search_id}").status_code == 404
    assert len(history) == 0


def test_ai_search_rejects_bad_filters(client, history):
    r = client.post(
        "/ai-search",
        files={"image": ("x.jpg", b"data", "image/jpeg")},
        data={"filters": "{not json"},
    )
    assert r.status_code == 422
    assert len(history) == 0


def test_ai_suggestions(client):
    r = client.post("/ai-search/suggestions", files={"image": ("x.jpg", b"data", "image/jpeg")})
    assert r.status_code == 200
    assert 0.7 <= r.json()["confidence"] < 0.9


def test_listings_by_location(client):
    body = client.get("/listings/by-location/colorado").json()
    assert ids(body) == [4]
    body = client.get("/listings/by-location/ca", params={"instant_book": "false"}).json()
    assert ids(body) == [6]
