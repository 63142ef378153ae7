"""
Resolve an article id to the storage key of its base image.
"""
import json
import logging
from typing import Dict, Mapping

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import LookupUnavailable, NotFound

logger = logging.getLogger(__name__)


class MetadataLookup:
    def resolve_base_key(self, content_id: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class DynamoMetadataLookup(MetadataLookup):
    """
    Read the image field of an article record from DynamoDB.

    Only the single image attribute is projected; the rest of the record
    schema is none of our business.
    """

    def __init__(
        self,
        client,
        table: str,
        key_field: str = "id",
        image_field: str = "image",
    ):
        self._client = client
        self.table = table
        self.key_field = key_field
        self.image_field = image_field

    def resolve_base_key(self, content_id: str) -> str:
        try:
            response = self._client.get_item(
                TableName=self.table,
                Key={self.key_field: {"S": content_id}},
                ProjectionExpression="#img",
                ExpressionAttributeNames={"#img": self.image_field},
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            logger.warning("lookup %s failed: %s", content_id, error_code)
            if error_code == "ResourceNotFoundException":
                # a missing table is misconfiguration, not a missing article
                raise LookupUnavailable(f"Table {self.table} does not exist", e) from e
            raise LookupUnavailable(f"DynamoDB error {error_code}", e) from e
        except BotoCoreError as e:
            logger.warning("lookup %s failed: %s", content_id, e)
            raise LookupUnavailable("DynamoDB unreachable", e) from e

        item = response.get("Item")
        if not item:
            raise NotFound(f"No article with id {content_id}")
        base_key = item.get(self.image_field, {}).get("S")
        if not base_key:
            raise NotFound(f"Article {content_id} has no {self.image_field}")
        return base_key


class MappingMetadataLookup(MetadataLookup):
    """Static id -> base key mapping, for local development"""

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping: Dict[str, str] = dict(mapping)

    def resolve_base_key(self, content_id: str) -> str:
        try:
            return self._mapping[content_id]
        except KeyError:
            raise NotFound(f"No article with id {content_id}") from None


def load_mapping(path: str) -> MappingMetadataLookup:
    """Load ``{"<article id>": "<base key>", ...}`` from a JSON file"""
    with open(path) as mapping_file:
        return MappingMetadataLookup(json.loads(mapping_file.read()))
