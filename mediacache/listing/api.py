from fastapi import Depends, Query
from fastapi.routing import APIRouter

from mediacache.depends import get_listing

from . import schemas, tokens
from .ranking import RankedListing

router = APIRouter()
tags = ["articles"]


@router.get(
    "/articles/latest",
    response_model=schemas.ArticleList,
    response_model_by_alias=True,
    tags=tags,
)
def latest_articles(
    limit: int = Query(default=10, gt=0),
    next_token: str = Query(default="", alias="nextToken"),
    listing: RankedListing = Depends(get_listing),
):
    return listing.latest(tokens.decode_token(next_token), limit)


@router.get(
    "/articles/popular",
    response_model=schemas.ArticleList,
    response_model_by_alias=True,
    tags=tags,
)
def popular_articles(
    limit: int = Query(default=10, gt=0),
    next_token: str = Query(default="", alias="nextToken"),
    listing: RankedListing = Depends(get_listing),
):
    return listing.popular(tokens.decode_token(next_token), limit)


@router.get(
    "/articles/metrics",
    response_model=schemas.ArticleMetrics,
    response_model_by_alias=True,
    tags=tags,
)
def article_metrics(listing: RankedListing = Depends(get_listing)):
    return listing.metrics()
