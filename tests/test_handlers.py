import base64
import json
from unittest.mock import MagicMock

import pytest
import redis

from mediacache.derivatives.cache import DerivativeCache
from mediacache.exceptions import InvalidKeyFormat
from mediacache.handlers import ImageHandler, ListingHandler, parse_size
from mediacache.listing.ranking import RankedListing
from mediacache.listing.tokens import decode_token
from mediacache.storage import LocalObjectStore, StoredObject
from tests.conftest import image_size


def event(article_id="123", size="300"):
    query = {"size": size} if size is not None else None
    return {"pathParameters": {"id": article_id}, "queryStringParameters": query}


@pytest.fixture
def image_handler(cache):
    return ImageHandler(cache, "public, max-age=60")


def test_image_event(image_handler, store):
    response = image_handler(event(), None)
    assert response["statusCode"] == 200
    assert response["isBase64Encoded"] is True
    assert response["headers"]["Content-Type"] == "image/jpeg"
    assert response["headers"]["Cache-Control"] == "public, max-age=60"
    body = base64.b64decode(response["body"])
    assert image_size(body) == ("JPEG", (300, 225))
    assert store.get("articles/123-300.jpg").body == body


def test_image_event_without_query_uses_default(image_handler):
    response = image_handler(event(size=None), None)
    assert response["statusCode"] == 200
    assert image_size(base64.b64decode(response["body"]))[1] == (640, 480)


def test_unknown_article(image_handler):
    response = image_handler(event(article_id="999"), None)
    assert response["statusCode"] == 404
    assert response["isBase64Encoded"] is False
    assert response["headers"]["Cache-Control"] == "no-store"
    assert json.loads(response["body"])["error"] == "NotFound"


@pytest.mark.parametrize("size", ["abc", "0", "-20", "1.5"])
def test_bad_size(image_handler, size):
    response = image_handler(event(size=size), None)
    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == "InvalidKeyFormat"


def test_missing_id(image_handler):
    response = image_handler({"pathParameters": None}, None)
    assert response["statusCode"] == 400


def test_cached_image_keeps_jpeg_content_type(image_handler, store):
    store.objects["articles/123-300.jpg"] = StoredObject(
        key="articles/123-300.jpg", body=b"cached", content_type="application/octet-stream"
    )
    response = image_handler(event(), None)
    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "image/jpeg"
    assert response["headers"]["X-Cache"] == "hit"
    assert base64.b64decode(response["body"]) == b"cached"


def test_corrupt_sidecar_is_store_unavailable(tmp_path, lookup, generator, source_jpeg):
    local = LocalObjectStore(tmp_path)
    local.put("articles/123.jpg", source_jpeg, "image/jpeg")
    local.put("articles/123-300.jpg", b"cached", "image/jpeg")
    (tmp_path / "articles" / "123-300.jpg.meta.json").write_text("{trunc")
    handler = ImageHandler(DerivativeCache(local, lookup, generator, 640), "public")

    response = handler(event(), None)

    assert response["statusCode"] == 503
    assert response["headers"]["Cache-Control"] == "no-store"
    assert json.loads(response["body"])["error"] == "StoreUnavailable"
    assert generator.calls == 0


def test_parse_size():
    assert parse_size(None) is None
    assert parse_size("") is None
    assert parse_size("42") == 42
    with pytest.raises(InvalidKeyFormat):
        parse_size("x")


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.pipeline.return_value = MagicMock()
    return client


@pytest.fixture
def listing_handler(redis_client):
    return ListingHandler(RankedListing(redis_client, "latest", "popular", "count"))


def test_latest_articles_action(listing_handler, redis_client):
    redis_client.pipeline.return_value.execute.return_value = [[b"1"] * 10, 30]
    result = listing_handler({"action": "latestArticles", "args": {}}, None)
    assert result["ids"] == ["1"] * 10
    assert decode_token(result["nextToken"]) == 10


def test_popular_articles_action_with_token(listing_handler, redis_client):
    first = {"action": "popularArticles", "args": {"limit": 10, "nextToken": ""}}
    redis_client.pipeline.return_value.execute.return_value = [[b"1"] * 10, 11]
    token = listing_handler(first, None)["nextToken"]
    redis_client.pipeline.return_value.execute.return_value = [[b"5"], 11]
    second = listing_handler(
        {"action": "popularArticles", "args": {"limit": 10, "nextToken": token}}, None
    )
    assert second == {"ids": ["5"], "nextToken": ""}
    redis_client.pipeline.return_value.zrevrange.assert_called_with("popular", 10, 19)


def test_article_metrics_action(listing_handler, redis_client):
    redis_client.pipeline.return_value.execute.side_effect = [[b"2", []]]
    assert listing_handler({"action": "articleMetrics", "args": {}}, None) == {
        "total": 2,
        "dailyCounts": {},
    }


def test_listing_errors_are_returned(listing_handler, redis_client):
    redis_client.pipeline.return_value.execute.side_effect = redis.exceptions.TimeoutError()
    result = listing_handler({"action": "latestArticles", "args": {}}, None)
    assert result == {"error": "An error has occurred retrieving articles"}


def test_bad_cursor_is_returned(listing_handler):
    result = listing_handler({"action": "latestArticles", "args": {"nextToken": "!!"}}, None)
    assert "error" in result


def test_unknown_action(listing_handler):
    with pytest.raises(ValueError):
        listing_handler({"action": "blogMetrics", "args": {}}, None)


@pytest.mark.parametrize("limit", [0, -1, "ten"])
def test_bad_limit_is_returned(listing_handler, redis_client, limit):
    result = listing_handler({"action": "latestArticles", "args": {"limit": limit}}, None)
    assert "error" in result
    redis_client.pipeline.assert_not_called()
