def test_all_returns_every_branch_even_when_one_fails(api_client):
    response = api_client.get("/api/places/all", params={"location": "New York"})
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"events", "restaurants", "attractions"}
    assert [place["id"] for place in data["restaurants"]] == ["r1"]
    assert data["attractions"] == []


def test_category_alias(api_client):
    response = api_client.get("/api/places/category/food", params={"location": "New York"})
    assert response.status_code == 200
    assert [place["name"] for place in response.json()] == ["Jazz Diner"]


def test_unknown_category_is_empty(api_client):
    response = api_client.get("/api/places/category/spaceships", params={"location": "New York"})
    assert response.json() == []


def test_search_matches_across_branches(api_client):
    response = api_client.get("/api/places/search", params={"query": "jazz", "location": "New York"})
    data = response.json()
    assert [place["id"] for place in data["restaurants"]] == ["r1"]
    assert {event["id"] for event in data["events"]} == {"early", "boston"}


def test_place_lookup_by_source_and_id(api_client):
    response = api_client.get("/api/places/google_places/r1")
    assert response.status_code == 200
    assert response.json()["name"] == "Jazz Diner"


def test_event_lookup_by_source_and_id(api_client):
    response = api_client.get("/api/places/eventbrite/early")
    assert response.status_code == 200
    assert response.json()["name"] == "Acoustic Jazz"


def test_lookup_misses_are_not_found(api_client):
    assert api_client.get("/api/places/google_places/nope").status_code == 404
    assert api_client.get("/api/places/eventbrite/nope").status_code == 404
    assert api_client.get("/api/places/yelp/r1").status_code == 404
