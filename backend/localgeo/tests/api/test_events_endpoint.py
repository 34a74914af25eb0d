def test_tonight_ranks_by_start_then_distance(api_client):
    response = api_client.get("/api/events/tonight", params={"city": "New York", "lat": 40.7128, "lon": -74.0060})
    assert response.status_code == 200
    data = response.json()
    assert [event["id"] for event in data] == ["early", "late"]
    first = data[0]
    assert {"name", "venue", "start_time_utc", "distance_miles", "drive_time_minutes", "walk_time_minutes"}.issubset(
        first.keys()
    )
    assert first["drive_time_minutes"] >= 2
    assert first["walk_time_minutes"] >= 1


def test_tonight_with_mood_and_radius(api_client):
    response = api_client.get(
        "/api/events/tonight",
        params={"city": "New York", "lat": 40.7128, "lon": -74.0060, "mood": "chill", "radius_miles": 500},
    )
    assert [event["id"] for event in response.json()] == ["early", "boston"]


def test_tonight_without_viewer_has_no_distances(api_client):
    data = api_client.get("/api/events/tonight", params={"city": "New York"}).json()
    assert len(data) == 3
    assert all("distance_miles" not in event for event in data)


def test_tonight_requires_city(api_client):
    assert api_client.get("/api/events/tonight").status_code == 422


def test_events_for_date_pass_keyword_to_source(api_client, event_source):
    response = api_client.get("/api/events", params={"city": "Chicago", "date": "2025-03-01", "q": "jazz"})
    assert response.status_code == 200
    assert {event["id"] for event in response.json()} == {"early", "boston"}

    region, start_utc, end_utc, keyword = event_source.calls[-1]
    assert region == "Chicago"
    assert keyword == "jazz"
    assert start_utc.isoformat() == "2025-03-01T00:00:00+00:00"
    assert end_utc.isoformat() == "2025-03-01T23:59:59+00:00"


def test_events_default_to_new_york(api_client, event_source):
    response = api_client.get("/api/events")
    assert response.status_code == 200
    assert len(response.json()) == 3
    assert event_source.calls[-1][0] == "New York"
    assert event_source.calls[-1][3] is None


def test_artist_search_sends_keyword_without_region(api_client, event_source):
    response = api_client.get("/api/events/search", params={"artist": "karaoke"})
    assert [event["id"] for event in response.json()] == ["late"]
    region, _, _, keyword = event_source.calls[-1]
    assert region == ""
    assert keyword == "karaoke"


def test_tonight_passes_keyword(api_client, event_source):
    response = api_client.get("/api/events/tonight", params={"city": "New York", "q": "acoustic"})
    assert [event["id"] for event in response.json()] == ["early"]
    assert event_source.calls[-1][3] == "acoustic"
