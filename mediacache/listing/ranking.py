import logging
from typing import List, Optional

import redis

from mediacache.exceptions import InvalidCursor, ListingUnavailable

from . import schemas, tokens

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 50
METRICS_DAYS = 7


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _as_str(value) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class RankedListing:
    """
    Page through the latest and popular article rankings.

    No page ever reaches past ``max_items``: a listing is a short, bounded
    ranking, not a way to enumerate every article.
    """

    def __init__(
        self,
        client: "redis.Redis",
        latest_key: str,
        popular_key: str,
        count_key: str,
        max_items: int = DEFAULT_MAX_ITEMS,
    ):
        self._redis = client
        self.latest_key = latest_key
        self.popular_key = popular_key
        self.count_key = count_key
        self.max_items = max_items

    def _window(self, start: int, limit: int) -> Optional[int]:
        """Inclusive end index of the page, or None when the page is empty"""
        if not _is_count(start) or not _is_count(limit) or limit == 0:
            raise InvalidCursor(f"Invalid page window start={start!r} limit={limit!r}")
        end = min(start + limit, self.max_items) - 1
        return end if end >= start else None

    def _page(self, ids: List, length: int, end: int) -> schemas.ArticleList:
        next_index = end + 1 if min(length, self.max_items) > end + 1 else None
        return schemas.ArticleList(
            ids=[_as_str(i) for i in ids],
            next_token=tokens.encode_token(next_index) if next_index else "",
        )

    def latest(self, start: int = 0, limit: int = 10) -> schemas.ArticleList:
        end = self._window(start, limit)
        if end is None:
            return schemas.ArticleList(ids=[])
        try:
            pipe = self._redis.pipeline()
            pipe.lrange(self.latest_key, start, end)
            pipe.llen(self.latest_key)
            ids, length = pipe.execute()
        except redis.exceptions.RedisError as e:
            logger.error("latest listing failed: %s", e)
            raise ListingUnavailable("An error has occurred retrieving articles", e) from e
        return self._page(ids, length, end)

    def popular(self, start: int = 0, limit: int = 10) -> schemas.ArticleList:
        end = self._window(start, limit)
        if end is None:
            return schemas.ArticleList(ids=[])
        try:
            pipe = self._redis.pipeline()
            pipe.zrevrange(self.popular_key, start, end)
            pipe.zcount(self.popular_key, 0, "+inf")
            ids, length = pipe.execute()
        except redis.exceptions.RedisError as e:
            logger.error("popular listing failed: %s", e)
            raise ListingUnavailable("An error has occurred retrieving articles", e) from e
        return self._page(ids, length, end)

    def metrics(self) -> schemas.ArticleMetrics:
        """Total article count and per-day counts for the most recent publishing days"""
        try:
            pipe = self._redis.pipeline()
            pipe.get(f"{self.count_key}:total")
            pipe.zrevrange(f"{self.count_key}:days", 0, METRICS_DAYS - 1)
            total, days = pipe.execute()

            days = [_as_str(d) for d in days]
            pipe = self._redis.pipeline()
            for day in days:
                pipe.get(f"{self.count_key}:{day}")
            counts = pipe.execute() if days else []
        except redis.exceptions.RedisError as e:
            logger.error("article metrics failed: %s", e)
            raise ListingUnavailable("An error has occurred retrieving metrics", e) from e
        return schemas.ArticleMetrics(
            total=int(total or 0),
            daily_counts={day: int(count or 0) for day, count in zip(days, counts)},
        )
