import enum
from typing import Dict

from pydantic import BaseModel

JPEG_CONTENT_TYPE = "image/jpeg"


class CacheStatus(str, enum.Enum):
    HIT = "hit"
    MISS = "miss"


class DerivativeBlob(BaseModel):
    key: str
    body: bytes
    content_type: str = JPEG_CONTENT_TYPE
    attributes: Dict[str, str] = {}
    cache_status: CacheStatus
