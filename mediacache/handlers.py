"""
Serverless request handlers.

``ImageHandler`` answers API Gateway proxy events for article images and
``ListingHandler`` answers AppSync resolver events for article listings.
Both are constructed once per execution environment with their clients
injected, then invoked once per request.
"""
import base64
import json
import logging
from typing import Any, Dict, Optional

from . import depends
from .derivatives.cache import DerivativeCache
from .exceptions import InvalidKeyFormat, MediaCacheError
from .listing import tokens
from .listing.ranking import RankedListing
from .settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


def error_response(exc: MediaCacheError) -> Dict[str, Any]:
    return {
        "isBase64Encoded": False,
        "statusCode": exc.status_code,
        "headers": {"Content-Type": "application/json", "Cache-Control": "no-store"},
        "body": json.dumps(exc.to_dict()),
    }


def parse_size(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        size = int(raw)
    except (TypeError, ValueError):
        raise InvalidKeyFormat(f"size must be a positive integer, got {raw!r}") from None
    if size <= 0:
        raise InvalidKeyFormat(f"size must be a positive integer, got {raw!r}")
    return size


class ImageHandler:
    def __init__(self, cache: DerivativeCache, cache_control: str):
        self.cache = cache
        self.cache_control = cache_control

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageHandler":
        return cls(depends.make_derivative_cache(settings), settings.cache_control_value)

    def __call__(self, event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        content_id = (event.get("pathParameters") or {}).get("id")
        raw_size = (event.get("queryStringParameters") or {}).get("size")
        try:
            if not content_id:
                raise InvalidKeyFormat("Missing article id")
            size = parse_size(raw_size)
            logger.info("Loading image for article %s @ %s px", content_id, size or "default")
            blob = self.cache.fetch_or_create(content_id=content_id, width=size)
        except MediaCacheError as e:
            log = logger.error if e.status_code >= 500 else logger.info
            log("article %s image failed: %s %s", content_id, e.kind, e.message)
            return error_response(e)

        return {
            "isBase64Encoded": True,
            "statusCode": 200,
            "headers": {
                "Content-Type": blob.content_type,
                "Cache-Control": self.cache_control,
                "X-Cache": blob.cache_status.value,
            },
            "body": base64.b64encode(blob.body).decode("ascii"),
        }


class ListingHandler:
    def __init__(self, listing: RankedListing):
        self.listing = listing

    @classmethod
    def from_settings(cls, settings: Settings) -> "ListingHandler":
        return cls(depends.make_listing(settings))

    def __call__(self, event: Dict[str, Any], context: Any = None) -> Optional[Dict[str, Any]]:
        action = event.get("action")
        args = event.get("args") or {}
        limit = args.get("limit")
        if limit is None:
            limit = DEFAULT_PAGE_SIZE
        try:
            start = tokens.decode_token(args.get("nextToken") or "")
            if action == "latestArticles":
                return self.listing.latest(start, limit).model_dump(by_alias=True)
            if action == "popularArticles":
                return self.listing.popular(start, limit).model_dump(by_alias=True)
            if action == "articleMetrics":
                return self.listing.metrics().model_dump(by_alias=True)
        except MediaCacheError as e:
            logger.error("%s failed: %s", action, e.message)
            return {"error": e.message}
        raise ValueError(f"No such method {action!r}")
