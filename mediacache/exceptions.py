"""
Failure kinds surfaced to the request boundary.

Every error carries a stable ``kind`` string and the HTTP status the boundary
should answer with.  Infrastructure exceptions (botocore, redis) are translated
into these at the client seam, so nothing above the clients ever inspects an
SDK error type.
"""
from typing import Dict, Optional


class MediaCacheError(Exception):
    kind = "MediaCacheError"
    status_code = 500
    retryable = False

    def __init__(self, message: str = "", cause: Optional[Exception] = None):
        super().__init__(message or self.kind)
        self.message = message or self.kind
        self.cause = cause

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.kind, "message": self.message}


class InvalidKeyFormat(MediaCacheError):
    kind = "InvalidKeyFormat"
    status_code = 400


class NotFound(MediaCacheError):
    kind = "NotFound"
    status_code = 404


class StoreUnavailable(MediaCacheError):
    kind = "StoreUnavailable"
    status_code = 503
    retryable = True


class LookupUnavailable(MediaCacheError):
    kind = "LookupUnavailable"
    status_code = 502
    retryable = True


class GenerationFailed(MediaCacheError):
    kind = "GenerationFailed"
    status_code = 500


class InvalidCursor(MediaCacheError):
    kind = "InvalidCursor"
    status_code = 400


class ListingUnavailable(MediaCacheError):
    kind = "ListingUnavailable"
    status_code = 503
    retryable = True
