import json
import sys

import click
from requests import Response


def handle_request_error(r: Response) -> dict:
    if r.ok:
        return {"response": r.json()}
    try:
        error = r.json()
    except ValueError:
        error = r.text
    return {"status": r.status_code, "url": r.url, "error": error}


def exit_with(out: dict):
    if out.get("error"):
        click.secho(json.dumps(out, indent=2, sort_keys=True), fg="red")
        sys.exit(1)
    click.echo(json.dumps(out, indent=2, sort_keys=True))
    sys.exit(0)
