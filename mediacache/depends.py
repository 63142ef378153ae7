"""
Client construction and FastAPI endpoint dependencies.

Every client is built explicitly from settings once per process (app startup
or Lambda cold start) and handed to the objects that need it.  Request code
never creates clients on first use.
"""
import boto3
import redis
from botocore.client import Config
from fastapi import Request

from .derivatives.cache import DerivativeCache
from .derivatives.imaging import ImageGenerator
from .listing.ranking import RankedListing
from .metadata import DynamoMetadataLookup, MetadataLookup, load_mapping
from .settings import Settings
from .storage import LocalObjectStore, ObjectStore, S3ObjectStore


def _client_args(settings: Settings, endpoint_url=None) -> dict:
    client_args = {
        "region_name": settings.aws_region,
        "endpoint_url": endpoint_url,
    }
    return {k: v for k, v in client_args.items() if v}


def make_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        config=Config(signature_version="s3v4"),
        **_client_args(settings, settings.s3_endpoint_url),
    )


def make_dynamodb_client(settings: Settings):
    return boto3.client(
        "dynamodb", **_client_args(settings, settings.dynamodb_endpoint_url)
    )


def make_store(settings: Settings) -> ObjectStore:
    if settings.storage_backend == "local":
        return LocalObjectStore(settings.storage_path)
    return S3ObjectStore(make_s3_client(settings), settings.content_bucket)


def make_lookup(settings: Settings) -> MetadataLookup:
    if settings.metadata_file:
        return load_mapping(settings.metadata_file)
    return DynamoMetadataLookup(
        make_dynamodb_client(settings),
        settings.articles_table,
        key_field=settings.article_key_field,
        image_field=settings.image_field,
    )


def make_derivative_cache(settings: Settings) -> DerivativeCache:
    return DerivativeCache(
        store=make_store(settings),
        lookup=make_lookup(settings),
        generator=ImageGenerator(
            quality=settings.jpeg_quality, max_width=settings.max_image_width
        ),
        default_width=settings.default_image_width,
        suffixes=settings.asset_suffixes,
    )


def make_redis(settings: Settings):
    if settings.redis_cluster:
        return redis.RedisCluster.from_url(settings.redis_url)
    return redis.Redis.from_url(settings.redis_url)


def make_listing(settings: Settings) -> RankedListing:
    return RankedListing(
        make_redis(settings),
        latest_key=settings.latest_content_key,
        popular_key=settings.popular_content_key,
        count_key=settings.article_count_key,
        max_items=settings.listing_max_items,
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_derivative_cache(request: Request) -> DerivativeCache:
    return request.app.state.derivative_cache


def get_listing(request: Request) -> RankedListing:
    return request.app.state.listing
