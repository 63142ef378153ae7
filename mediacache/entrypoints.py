"""
Lambda entry points: ``mediacache.entrypoints.image_handler`` and
``mediacache.entrypoints.listing_handler``.

Clients are built here, at cold start, from the environment.
"""
from .handlers import ImageHandler, ListingHandler
from .logs import configure_logging
from .settings import settings

configure_logging(settings.log_level)

image_handler = ImageHandler.from_settings(settings)
listing_handler = ListingHandler.from_settings(settings)
