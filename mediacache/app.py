import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__, api, depends, logs
from .derivatives import api as derivatives_api
from .derivatives.cache import DerivativeCache
from .exceptions import MediaCacheError
from .listing import api as listing_api
from .listing.ranking import RankedListing
from .settings import Settings
from .settings import settings as default_settings

logger = logging.getLogger("api")

# errors must never be cached by browsers or the CDN in front of us
ERROR_HEADERS = {"Cache-Control": "no-store"}


def register_handlers(app: FastAPI):
    @app.exception_handler(MediaCacheError)
    async def media_cache_exception_handler(r: Request, exc: MediaCacheError):
        if exc.status_code >= 500:
            logger.error("%s %s: %s", r.method, r.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=ERROR_HEADERS
        )


def create_app(
    settings: Optional[Settings] = None,
    derivative_cache: Optional[DerivativeCache] = None,
    listing: Optional[RankedListing] = None,
) -> FastAPI:
    settings = settings or default_settings
    logs.configure_logging(settings.log_level)
    app = FastAPI(
        title="mediacache",
        version=__version__,
    )
    app.state.settings = settings
    app.state.derivative_cache = derivative_cache or depends.make_derivative_cache(settings)
    app.state.listing = listing or depends.make_listing(settings)

    app.include_router(api.router, prefix="/api")
    app.include_router(derivatives_api.router, prefix="/api")
    app.include_router(listing_api.router, prefix="/api")
    register_handlers(app)
    return app
