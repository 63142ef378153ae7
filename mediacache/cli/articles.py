import click
from click_aliases import ClickAliasedGroup

from . import config
from .util import exit_with, handle_request_error


def _list(ctx, ranking: str, limit: int, next_token: str, follow: bool):
    ctx = config.getctx(ctx)
    while True:
        r = ctx.session.get(
            f"articles/{ranking}", params={"limit": limit, "nextToken": next_token}
        )
        if not r.ok:
            exit_with(handle_request_error(r))
        page = r.json()
        for article_id in page["ids"]:
            click.echo(article_id)
        next_token = page["nextToken"]
        if not (follow and next_token):
            break
    if next_token:
        click.secho(f"nextToken: {next_token}", fg="bright_black")


def make(cli: click.Group):
    @cli.group(name="articles", cls=ClickAliasedGroup, aliases=["a"])
    def articles():
        pass

    @articles.command(name="latest", aliases=["l"])
    @click.option("--limit", type=click.IntRange(min=1), default=10)
    @click.option("--next-token", type=click.STRING, default="")
    @click.option("--all", "follow", is_flag=True, help="Follow nextToken to the end")
    @click.pass_obj
    def latest(ctx, limit, next_token, follow):
        _list(ctx, "latest", limit, next_token, follow)

    @articles.command(name="popular", aliases=["p"])
    @click.option("--limit", type=click.IntRange(min=1), default=10)
    @click.option("--next-token", type=click.STRING, default="")
    @click.option("--all", "follow", is_flag=True, help="Follow nextToken to the end")
    @click.pass_obj
    def popular(ctx, limit, next_token, follow):
        _list(ctx, "popular", limit, next_token, follow)

    @articles.command(name="metrics", aliases=["m"])
    @click.pass_obj
    def metrics(ctx):
        ctx = config.getctx(ctx)
        exit_with(handle_request_error(ctx.session.get("articles/metrics")))
