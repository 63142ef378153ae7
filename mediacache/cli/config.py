import json
import os
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, ValidationError
from requests_toolbelt.sessions import BaseUrlSession


class Config(BaseModel):
    api_url: str = "http://localhost:8100/api"


class Ctx(BaseModel):
    config: Config
    configPath: str
    session: BaseUrlSession

    model_config = ConfigDict(arbitrary_types_allowed=True)


def make() -> Config:
    return Config()


def getctx(ctx: Dict[str, Any]) -> Ctx:
    return Ctx(**ctx)


def save(ctx: Ctx):
    os.makedirs(os.path.dirname(ctx.configPath), exist_ok=True)
    with open(ctx.configPath, "w") as out:
        out.write(ctx.config.model_dump_json())


def load_config(path: str) -> Config:
    if os.path.exists(path):
        try:
            with open(path) as config_file:
                return Config(**json.loads(config_file.read()))
        except (OSError, ValueError, ValidationError):
            return make()
    return make()
