import io
import threading
from typing import Dict, List, Optional

import pytest
from PIL import Image

from mediacache.derivatives.cache import DerivativeCache
from mediacache.derivatives.imaging import ImageGenerator
from mediacache.exceptions import LookupUnavailable, NotFound, StoreUnavailable
from mediacache.metadata import MetadataLookup
from mediacache.storage import ObjectStore, StoredObject

BASE_KEY = "articles/123.jpg"


def make_jpeg(width: int = 640, height: int = 480, color=(200, 80, 40)) -> bytes:
    img = Image.new("RGB", (width, height), color)
    # a gradient so resampling has something to do
    for x in range(0, width, 16):
        for y in range(0, height, 16):
            img.putpixel((x, y), (x % 256, y % 256, 128))
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=90)
    return buffer.getvalue()


def image_size(data: bytes):
    with Image.open(io.BytesIO(data)) as img:
        return img.format, img.size


class FakeStore(ObjectStore):
    def __init__(self, objects: Optional[Dict[str, bytes]] = None):
        self.objects: Dict[str, StoredObject] = {}
        self.gets: List[str] = []
        self.puts: List[str] = []
        self.fail_gets = False
        self.fail_puts = False
        self._lock = threading.Lock()
        for key, body in (objects or {}).items():
            self.objects[key] = StoredObject(key=key, body=body, content_type="image/jpeg")

    def get(self, key: str) -> StoredObject:
        with self._lock:
            self.gets.append(key)
        if self.fail_gets:
            raise StoreUnavailable("store is down")
        try:
            return self.objects[key]
        except KeyError:
            raise NotFound(key) from None

    def put(self, key, body, content_type="application/octet-stream", attributes=None):
        with self._lock:
            self.puts.append(key)
        if self.fail_puts:
            raise StoreUnavailable("store is read-only")
        with self._lock:
            self.objects[key] = StoredObject(
                key=key, body=body, content_type=content_type, attributes=attributes or {}
            )


class FakeLookup(MetadataLookup):
    def __init__(self, mapping: Optional[Dict[str, str]] = None):
        self.mapping = dict(mapping or {})
        self.calls: List[str] = []
        self.unavailable = False

    def resolve_base_key(self, content_id: str) -> str:
        self.calls.append(content_id)
        if self.unavailable:
            raise LookupUnavailable("table is down")
        try:
            return self.mapping[content_id]
        except KeyError:
            raise NotFound(content_id) from None


class SpyGenerator(ImageGenerator):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = 0
        self._lock = threading.Lock()

    def generate(self, source: bytes, width: int) -> bytes:
        with self._lock:
            self.calls += 1
        return super().generate(source, width)


@pytest.fixture
def source_jpeg() -> bytes:
    return make_jpeg(640, 480)


@pytest.fixture
def store(source_jpeg) -> FakeStore:
    return FakeStore({BASE_KEY: source_jpeg})


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup({"123": BASE_KEY})


@pytest.fixture
def generator() -> SpyGenerator:
    return SpyGenerator()


@pytest.fixture
def cache(store, lookup, generator) -> DerivativeCache:
    return DerivativeCache(store, lookup, generator, default_width=640)
