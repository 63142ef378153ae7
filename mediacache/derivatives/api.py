from typing import Optional

from fastapi import Depends, Query, Response
from fastapi.routing import APIRouter

from mediacache.depends import get_derivative_cache, get_settings
from mediacache.settings import Settings

from .cache import DerivativeCache
from .schemas import DerivativeBlob

router = APIRouter()
tags = ["images"]


def image_response(blob: DerivativeBlob, cache_control: str) -> Response:
    return Response(
        content=blob.body,
        media_type=blob.content_type,
        headers={
            "Cache-Control": cache_control,
            "X-Cache": blob.cache_status.value,
        },
    )


@router.get("/images/{content_id}", response_class=Response, tags=tags)
def get_article_image(
    content_id: str,
    size: Optional[int] = Query(default=None, gt=0),
    cache: DerivativeCache = Depends(get_derivative_cache),
    settings: Settings = Depends(get_settings),
):
    blob = cache.fetch_or_create(content_id=content_id, width=size)
    return image_response(blob, settings.cache_control_value)


@router.get("/assets/{base_key:path}", response_class=Response, tags=tags)
def get_asset_image(
    base_key: str,
    size: Optional[int] = Query(default=None, gt=0),
    cache: DerivativeCache = Depends(get_derivative_cache),
    settings: Settings = Depends(get_settings),
):
    blob = cache.fetch_or_create(base_key=base_key, width=size)
    return image_response(blob, settings.cache_control_value)
