import click

from . import config
from .util import exit_with, handle_request_error


def make(cli: click.Group):
    @click.command(name="info")
    @click.pass_obj
    def info(ctx):
        ctx = config.getctx(ctx)
        r = ctx.session.get("info")
        if not r.ok:
            exit_with(handle_request_error(r))
        out = r.json()
        out.update(ctx.config.model_dump())
        out.update({"configPath": ctx.configPath})
        exit_with(out)

    @click.command(name="set-url")
    @click.argument("api_url")
    @click.pass_obj
    def set_url(ctx, api_url):
        ctx = config.getctx(ctx)
        ctx.config.api_url = api_url
        config.save(ctx)
        click.secho(f"API url set to {api_url}", fg="green", bold=True)

    cli.add_command(info)
    cli.add_command(set_url)
