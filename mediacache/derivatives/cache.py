"""
Cache-aside lookup of image derivatives.

A request names an article (or, on the direct path, a base key) and a width.
The derivative key is derived from the base key; if the store already holds
that key its bytes are returned as-is.  Otherwise the base image is fetched, rendered
and written back before the rendition is returned.

There is deliberately no de-duplication of concurrent misses: rendering is
deterministic and ``put`` overwrites, so two requests racing on the same key
both succeed and leave the same bytes behind.
"""
import logging
from typing import Dict, Iterable, Optional

from mediacache import keys
from mediacache.exceptions import NotFound, StoreUnavailable
from mediacache.metadata import MetadataLookup
from mediacache.storage import ObjectStore

from .imaging import ImageGenerator
from .schemas import JPEG_CONTENT_TYPE, CacheStatus, DerivativeBlob

logger = logging.getLogger(__name__)

CONTENT_ID_ATTRIBUTE = "content-id"
BASE_KEY_ATTRIBUTE = "base-key"


class DerivativeCache:
    def __init__(
        self,
        store: ObjectStore,
        lookup: MetadataLookup,
        generator: ImageGenerator,
        default_width: int,
        suffixes: Iterable[str] = keys.DEFAULT_SUFFIXES,
    ):
        self.store = store
        self.lookup = lookup
        self.generator = generator
        self.default_width = default_width
        self.suffixes = tuple(suffixes)

    def fetch_or_create(
        self,
        content_id: Optional[str] = None,
        width: Optional[int] = None,
        base_key: Optional[str] = None,
    ) -> DerivativeBlob:
        """
        Return the derivative of an article's image at ``width`` pixels.

        :param content_id: article id, resolved to its base key through the lookup
        :param width: requested width; the configured default when omitted
        :param base_key: skip the lookup and derive from this key directly
        :raises MediaCacheError: a subclass naming the failure kind.  The only
            failure that does not propagate is a failed write-back after a
            successful render.
        """
        if content_id is None and base_key is None:
            raise ValueError("Either content_id or base_key is required")
        if width is None:
            width = self.default_width
        keys.validate_width(width)
        if base_key is None:
            base_key = self.lookup.resolve_base_key(content_id)
        derivative_key = keys.derive_key(base_key, width, self.suffixes)
        logger.debug("key_resolved %s -> %s", base_key, derivative_key)

        try:
            cached = self.store.get(derivative_key)
        except NotFound:
            logger.info("cache_miss %s", derivative_key)
        else:
            logger.debug("cache_hit %s", derivative_key)
            return DerivativeBlob(
                key=derivative_key,
                body=cached.body,
                content_type=JPEG_CONTENT_TYPE,
                attributes=cached.attributes,
                cache_status=CacheStatus.HIT,
            )
        return self._create(content_id, base_key, derivative_key, width)

    def _create(
        self,
        content_id: Optional[str],
        base_key: str,
        derivative_key: str,
        width: int,
    ) -> DerivativeBlob:
        source = self.store.get(base_key)
        logger.debug("source_fetched %s (%d bytes)", base_key, len(source.body))

        body = self.generator.generate(source.body, width)
        logger.debug("generated %s (%d bytes)", derivative_key, len(body))

        attributes = self._attributes(content_id, base_key)
        try:
            self.store.put(derivative_key, body, JPEG_CONTENT_TYPE, attributes)
        except StoreUnavailable as e:
            # serve this one uncached; the next request takes the miss path again
            logger.error("write_failed %s: %s", derivative_key, e)
        else:
            logger.debug("write_ok %s", derivative_key)

        return DerivativeBlob(
            key=derivative_key,
            body=body,
            content_type=JPEG_CONTENT_TYPE,
            attributes=attributes,
            cache_status=CacheStatus.MISS,
        )

    @staticmethod
    def _attributes(content_id: Optional[str], base_key: str) -> Dict[str, str]:
        attributes = {BASE_KEY_ATTRIBUTE: base_key}
        if content_id is not None:
            attributes[CONTENT_ID_ATTRIBUTE] = content_id
        return attributes
