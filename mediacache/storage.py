"""
Object store clients.

Stores hand back opaque blobs by key.  A missing key is reported as
:class:`NotFound`; anything else that goes wrong talking to the store is
:class:`StoreUnavailable`, so callers never mistake an outage for a cache miss.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ValidationError

from .exceptions import InvalidKeyFormat, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}


class StoredObject(BaseModel):
    key: str
    body: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
    attributes: Dict[str, str] = {}


class ObjectStore:
    def get(self, key: str) -> StoredObject:  # pragma: no cover - interface
        raise NotImplementedError

    def put(
        self,
        key: str,
        body: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
        attributes: Optional[Dict[str, str]] = None,
    ) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class S3ObjectStore(ObjectStore):
    """Blobs in a single S3 bucket.  Attributes travel as user metadata."""

    def __init__(self, client, bucket: str):
        self._client = client
        self.bucket = bucket

    def get(self, key: str) -> StoredObject:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
            body = response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in MISSING_KEY_CODES:
                raise NotFound(f"s3://{self.bucket}/{key} does not exist") from e
            logger.warning("get %s failed: %s", key, error_code)
            raise StoreUnavailable(f"S3 error {error_code} reading {key}", e) from e
        except BotoCoreError as e:
            logger.warning("get %s failed: %s", key, e)
            raise StoreUnavailable(f"S3 unreachable reading {key}", e) from e
        return StoredObject(
            key=key,
            body=body,
            content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
            attributes=response.get("Metadata") or {},
        )

    def put(
        self,
        key: str,
        body: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
        attributes: Optional[Dict[str, str]] = None,
    ) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                Metadata=attributes or {},
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            logger.warning("put %s failed: %s", key, error_code)
            raise StoreUnavailable(f"S3 error {error_code} writing {key}", e) from e
        except BotoCoreError as e:
            logger.warning("put %s failed: %s", key, e)
            raise StoreUnavailable(f"S3 unreachable writing {key}", e) from e


class LocalObjectStore(ObjectStore):
    """
    Blobs as files under a root directory, for local development.

    Content type and attributes sit in a ``.meta.json`` sidecar.  The body file
    is moved into place last with an atomic rename, so a reader sees either
    the previous object or the complete new one.
    """

    META_SUFFIX = ".meta.json"

    def __init__(self, root: os.PathLike):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        root = self.root.resolve()
        candidate = root.joinpath(*key.strip("/").split("/"))
        resolved = candidate.resolve(strict=False)
        if resolved == root or root not in resolved.parents:
            raise InvalidKeyFormat(f"Invalid object key {key!r}")
        if resolved.name.endswith(self.META_SUFFIX):
            raise InvalidKeyFormat(f"Invalid object key {key!r}")
        return resolved

    def _meta_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.META_SUFFIX)

    def get(self, key: str) -> StoredObject:
        path = self._path(key)
        try:
            body = path.read_bytes()
        except FileNotFoundError as e:
            raise NotFound(f"{key} does not exist") from e
        except OSError as e:
            raise StoreUnavailable(f"Could not read {key}", e) from e
        meta = self._read_meta(key, self._meta_path(path))
        try:
            return StoredObject(
                key=key,
                body=body,
                content_type=meta.get("content_type", DEFAULT_CONTENT_TYPE),
                attributes=meta.get("attributes", {}),
            )
        except ValidationError as e:
            raise StoreUnavailable(f"Corrupt metadata for {key}", e) from e

    @staticmethod
    def _read_meta(key: str, meta_path: Path) -> dict:
        if not meta_path.exists():
            return {}
        try:
            meta = json.loads(meta_path.read_text())
        except (OSError, ValueError) as e:
            raise StoreUnavailable(f"Corrupt metadata for {key}", e) from e
        if not isinstance(meta, dict):
            raise StoreUnavailable(f"Corrupt metadata for {key}")
        return meta

    def put(
        self,
        key: str,
        body: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
        attributes: Optional[Dict[str, str]] = None,
    ) -> None:
        path = self._path(key)
        meta = {"content_type": content_type, "attributes": attributes or {}}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._write_atomic(self._meta_path(path), json.dumps(meta).encode("utf-8"))
            self._write_atomic(path, body)
        except OSError as e:
            raise StoreUnavailable(f"Could not write {key}", e) from e

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as out:
                out.write(data)
            os.replace(tmp, path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
