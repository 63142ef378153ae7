import click
import uvicorn

from .app import create_app
from .settings import settings


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8100, type=click.INT, show_default=True)
def main(host, port):
    """Serve the image and listing API for local development"""
    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")
