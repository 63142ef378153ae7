import os

import click
from click_aliases import ClickAliasedGroup
from requests_toolbelt.sessions import BaseUrlSession

from . import articles, config, image, info


class MediaCacheSession(BaseUrlSession):
    def __init__(self, cfg: config.Config):
        base_url = cfg.api_url
        base_url = (
            f'{base_url.rstrip("/")}/'  # tolerate input with or without trailing slash
        )
        super(MediaCacheSession, self).__init__(base_url=base_url)
        self.headers.update({"User-agent": "mcache"})


@click.group(cls=ClickAliasedGroup)
@click.option("--api-url", envvar="MEDIACACHE_API_URL")
@click.option(
    "--config-path",
    default=os.path.join(os.path.expanduser("~"), ".config", "mediacache.json"),
    envvar="MEDIACACHE_CONFIG_PATH",
    type=click.Path(dir_okay=False, file_okay=True, writable=True, resolve_path=True),
)
@click.version_option(package_name="mediacache")
@click.pass_context
def cli(ctx, api_url, config_path):
    conf = config.load_config(config_path)
    if api_url:
        conf.api_url = api_url
    ctx.obj = {
        "configPath": config_path,
        "config": conf,
        "session": MediaCacheSession(conf),
    }


image.make(cli)
articles.make(cli)
info.make(cli)
