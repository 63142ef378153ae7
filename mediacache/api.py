from fastapi import Depends
from fastapi.routing import APIRouter
from pydantic import BaseModel

from mediacache import __version__
from mediacache.depends import get_settings
from mediacache.settings import Settings

router = APIRouter()


class ServerInfo(BaseModel):
    public_address: str
    version: str
    default_image_width: int


@router.get("/info", response_model=ServerInfo, tags=["info"])
def get_info(settings: Settings = Depends(get_settings)):
    return ServerInfo(
        public_address=settings.public_name,
        version=__version__,
        default_image_width=settings.default_image_width,
    )
