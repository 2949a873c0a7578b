from unittest.mock import patch

import httpx
import pytest

from withme.integrations.email import EmailService
from withme.integrations.errors import IntegrationNotConfigured, UpstreamError
from withme.integrations.images import ImageSearchClient
from withme.integrations.mapbox import MapboxClient, chunk_waypoints
from withme.integrations.viator import ViatorClient, append_affiliate_params, build_destination_url


def json_response(method, url, payload, status_code=200):
    return httpx.Response(status_code, json=payload, request=httpx.Request(method, url))


# Mapbox

def test_geocode_simplifies_features():
    feature = {
        "id": "place.42",
        "text": "Lisbon",
        "place_name": "Lisbon, Lisboa, Portugal",
        "center": [-9.14, 38.72],
        "place_type": ["place"],
        "context": [
            {"id": "region.1", "text": "Lisboa"},
            {"id": "country.2", "text": "Portugal", "short_code": "pt"},
        ],
    }
    with patch("httpx.get", return_value=json_response("GET", "https://api.mapbox.com", {"features": [feature]})) as get:
        places = MapboxClient(access_token="tok").geocode("Lisbon", limit=1, types="place")

    assert places == [{
        "mapbox_id": "place.42",
        "name": "Lisbon",
        "full_name": "Lisbon, Lisboa, Portugal",
        "latitude": 38.72,
        "longitude": -9.14,
        "place_type": "place",
        "country": "Portugal",
        "country_code": "PT",
        "region": "Lisboa",
    }]
    assert get.call_args.kwargs["params"] == {"limit": 1, "types": "place", "access_token": "tok"}


def test_mapbox_without_token_is_not_configured():
    with pytest.raises(IntegrationNotConfigured):
        MapboxClient(access_token="").geocode("Lisbon")


def test_mapbox_http_error_is_upstream_error():
    failing = json_response("GET", "https://api.mapbox.com", {"message": "nope"}, status_code=500)
    with patch("httpx.get", return_value=failing):
        with pytest.raises(UpstreamError) as exc:
            MapboxClient(access_token="tok").geocode("Lisbon")
    assert exc.value.status_code == 502


def test_chunk_waypoints_shares_endpoints():
    coords = [(float(i), 0.0) for i in range(6)]

    assert chunk_waypoints(coords, size=10) == [coords]
    assert chunk_waypoints(coords, size=3) == [coords[0:3], coords[2:5], coords[4:6]]


def test_route_legs_across_chunks():
    coords = [(float(i), 0.0) for i in range(27)]
    responses = [
        json_response("GET", "https://api.mapbox.com", {"routes": [{"legs": [
            {"duration": 60, "distance": 100} for _ in range(24)
        ]}]}),
        json_response("GET", "https://api.mapbox.com", {"routes": [{"legs": [
            {"duration": 30, "distance": 50}, {"duration": 45, "distance": 70},
        ]}]}),
    ]
    with patch("httpx.get", side_effect=responses) as get:
        legs = MapboxClient(access_token="tok").route_legs(coords, "driving")

    assert len(legs) == 26
    assert [leg["duration_seconds"] for leg in legs[-3:]] == [60, 30, 45]
    assert get.call_count == 2
    assert get.call_args_list[1].args[0].endswith("/driving/24.0,0.0;25.0,0.0;26.0,0.0")


def test_route_legs_without_route_is_upstream_error():
    empty = json_response("GET", "https://api.mapbox.com", {"routes": [], "message": "No route found"})
    with patch("httpx.get", return_value=empty):
        with pytest.raises(UpstreamError):
            MapboxClient(access_token="tok").route_legs([(0.0, 0.0), (1.0, 1.0)])


def test_route_legs_rejects_unknown_profile():
    with pytest.raises(ValueError):
        MapboxClient(access_token="tok").route_legs([(0, 0), (1, 1)], "flying")


# Viator

def test_append_affiliate_params_is_idempotent():
    url = append_affiliate_params("https://www.viator.com/tours/123", "pid=P1&mcid=2")

    assert url == "https://www.viator.com/tours/123?pid=P1&mcid=2"
    assert append_affiliate_params(url, "pid=P1&mcid=2") == url
    assert append_affiliate_params("https://x.test/?a=1", "pid=P1") == "https://x.test/?a=1&pid=P1"
    assert append_affiliate_params("", "pid=P1") == ""


def test_destination_url_slugifies_name():
    with patch("withme.integrations.viator.settings") as settings:
        settings.viator_affiliate_params = ""
        assert build_destination_url("684", "New York City") == "https://www.viator.com/New-York-City/d684-ttd"


def test_search_products_normalizes_results():
    payload = {"success": True, "data": [{
        "code": "5010SYD",
        "title": "Harbour cruise",
        "shortDescription": "Sail the harbour",
        "price": 59.0,
        "currencyCode": "AUD",
        "rating": 4.7,
        "reviewCount": 812,
        "thumbnailHiResURL": "https://img.test/1.jpg",
        "webURL": "https://www.viator.com/tours/Sydney/Harbour/d357-5010SYD",
    }]}
    with patch("httpx.post", return_value=json_response("POST", "https://api.viator.com", payload)) as post:
        products = ViatorClient(api_key="key").search_products("cruise", "357", limit=5, currency="AUD")

    assert products[0]["product_code"] == "5010SYD"
    assert products[0]["currency"] == "AUD"
    assert "pid=" in products[0]["url"]
    sent = post.call_args.kwargs
    assert sent["json"]["destId"] == "357"
    assert sent["headers"]["exp-api-key"] == "key"


def test_viator_error_payload_is_upstream_error():
    payload = {"success": False, "errorMessageText": "Invalid destination"}
    with patch("httpx.post", return_value=json_response("POST", "https://api.viator.com", payload)):
        with pytest.raises(UpstreamError) as exc:
            ViatorClient(api_key="key").destination_products("0")
    assert exc.value.message == "Invalid destination"


def test_viator_non_json_body_is_upstream_error():
    html = httpx.Response(200, text="<html>Gateway</html>", request=httpx.Request("POST", "https://api.viator.com"))
    with patch("httpx.post", return_value=html):
        with pytest.raises(UpstreamError) as exc:
            ViatorClient(api_key="key").search_products("food tour")
    assert exc.value.status_code == 502
    assert exc.value.message == "Request to Viator failed"


def test_viator_non_object_body_is_upstream_error():
    with patch("httpx.post", return_value=json_response("POST", "https://api.viator.com", ["unexpected"])):
        with pytest.raises(UpstreamError):
            ViatorClient(api_key="key").search_products("food tour")


def test_mapbox_non_json_body_is_upstream_error():
    html = httpx.Response(200, text="not json", request=httpx.Request("GET", "https://api.mapbox.com"))
    with patch("httpx.get", return_value=html):
        with pytest.raises(UpstreamError):
            MapboxClient(access_token="tok").geocode("Porto")


# Images

def test_unsplash_results_are_normalized():
    payload = {"results": [{
        "id": "abc",
        "urls": {"regular": "https://img.test/r.jpg", "small": "https://img.test/s.jpg"},
        "alt_description": "tram in Lisbon",
        "user": {"name": "Ana", "links": {"html": "https://unsplash.com/@ana"}},
        "width": 4000,
        "height": 3000,
    }]}
    with patch("httpx.get", return_value=json_response("GET", "https://api.unsplash.com", payload)) as get:
        photos = ImageSearchClient(unsplash_access_key="ukey").search("lisbon", "unsplash", per_page=1)

    assert photos[0]["source"] == "unsplash"
    assert photos[0]["photographer"] == "Ana"
    assert get.call_args.kwargs["headers"]["Authorization"] == "Client-ID ukey"


def test_pexels_results_are_normalized():
    payload = {"photos": [{"id": 7, "src": {"large2x": "https://img.test/l.jpg", "medium": "https://img.test/m.jpg"},
                           "alt": "Belem tower", "photographer": "Rui"}]}
    with patch("httpx.get", return_value=json_response("GET", "https://api.pexels.com", payload)):
        photos = ImageSearchClient(pexels_api_key="pkey").search_pexels("belem")

    assert photos[0]["id"] == "7"
    assert photos[0]["url"] == "https://img.test/l.jpg"


# Email

def test_email_skipped_without_api_key():
    with patch("httpx.post") as post:
        assert EmailService(api_key="").send_welcome("a@example.com", "Ana") is False
    post.assert_not_called()


def test_email_escapes_user_content():
    with patch("httpx.post", return_value=json_response("POST", "https://api.useplunk.com", {"success": True})) as post:
        sent = EmailService(api_key="pk").send_comment_notification(
            to="owner@example.com",
            commenter_name="<b>Eve</b>",
            trip_name="Lisbon",
            comment_text="<script>alert(1)</script>",
            trip_url="https://withme.travel/trips/1",
        )

    assert sent is True
    body = post.call_args.kwargs["json"]["body"]
    assert "<script>" not in body
    assert "&lt;b&gt;Eve&lt;/b&gt;" in body
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer pk"


def test_email_failure_returns_false():
    failing = json_response("POST", "https://api.useplunk.com", {}, status_code=503)
    with patch("httpx.post", return_value=failing):
        assert EmailService(api_key="pk").send("a@example.com", "Hi", "<p>Hi</p>") is False
