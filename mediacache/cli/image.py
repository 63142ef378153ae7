import urllib.parse

import click
from click_aliases import ClickAliasedGroup

from . import config
from .util import exit_with, handle_request_error


def _save(r, output: str):
    with open(output, "wb") as out:
        out.write(r.content)
    click.secho(f"{output} ", fg="cyan", bold=True, nl=False)
    click.secho(f"{len(r.content)} bytes ", nl=False)
    click.secho(f"({r.headers.get('X-Cache', 'unknown')})", fg="bright_black")


def make(cli: click.Group):
    @cli.group(name="image", cls=ClickAliasedGroup, aliases=["i"])
    def image():
        pass

    @image.command(name="get", aliases=["g"])
    @click.argument("content_id")
    @click.option("--size", type=click.IntRange(min=1), default=None)
    @click.option("-o", "--output", type=click.Path(dir_okay=False), default=None)
    @click.pass_obj
    def get_image(ctx, content_id, size, output):
        ctx = config.getctx(ctx)
        params = {"size": size} if size else {}
        r = ctx.session.get(f"images/{urllib.parse.quote(content_id, safe='')}", params=params)
        if not r.ok:
            exit_with(handle_request_error(r))
        _save(r, output or f"{content_id}-{size or 'default'}.jpg")

    @image.command(name="asset", aliases=["a"])
    @click.argument("base_key")
    @click.option("--size", type=click.IntRange(min=1), default=None)
    @click.option("-o", "--output", type=click.Path(dir_okay=False), default=None)
    @click.pass_obj
    def get_asset(ctx, base_key, size, output):
        ctx = config.getctx(ctx)
        params = {"size": size} if size else {}
        r = ctx.session.get(f"assets/{urllib.parse.quote(base_key.lstrip('/'))}", params=params)
        if not r.ok:
            exit_with(handle_request_error(r))
        name = base_key.rstrip("/").split("/")[-1]
        _save(r, output or name)
