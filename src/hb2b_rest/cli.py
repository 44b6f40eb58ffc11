"""Command-line interface for the REST back-end integration.

Example:
    >>> # From terminal:
    >>> # hb2b-rest --version
    >>> # hb2b-rest headers message.json
    >>> # hb2b-rest decode-properties "p1=v1, p2=[t2]v2"
    >>> # hb2b-rest deliver message.json --url http://backend.example.com/hb2b
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from hb2b_rest import __version__
from hb2b_rest.errors import ConfigurationError, DeliveryError, FormatError
from hb2b_rest.models.constants import DEFAULT_TIMEOUT_MS
from hb2b_rest.models.message_units import MessageUnit, MessageUnitAdapter
from hb2b_rest.protocol.mapping import headers_for
from hb2b_rest.protocol.properties import decode_properties
from hb2b_rest.transport.client import DeliveryClient

app = typer.Typer(help="Holodeck B2B REST back-end integration CLI.")


def _load_message_unit(file: Path) -> MessageUnit:
    if not file.exists():
        raise typer.BadParameter(f"File not found: {file}")
    try:
        return MessageUnitAdapter.validate_json(file.read_bytes())
    except ValidationError as exc:
        errors = "\n".join(
            f"  - {'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        raise typer.BadParameter(f"Invalid message unit:\n{errors}") from exc


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(version: bool = VERSION_OPTION) -> None:
    """Holodeck B2B REST back-end integration CLI entrypoint."""


@app.command("headers")
def headers(
    file: Annotated[Path, typer.Argument(help="JSON file describing the message unit.")],
) -> None:
    """Print the HTTP headers a message unit is sent with."""
    message_unit = _load_message_unit(file)
    try:
        header_bag = headers_for(message_unit)
    except DeliveryError as exc:
        typer.echo(f"Cannot send message unit: {exc.message}", err=True)
        raise typer.Exit(1) from exc
    for name, value in sorted(header_bag.items()):
        typer.echo(f"{name}: {value}")


@app.command("decode-properties")
def decode_properties_command(
    text: Annotated[str, typer.Argument(help="Property list, e.g. 'p1=v1, p2=[t2]v2'.")],
) -> None:
    """Decode a property list header value and print it as JSON."""
    try:
        properties = decode_properties(text)
    except FormatError as exc:
        typer.echo(exc.message, err=True)
        raise typer.Exit(1) from exc
    typer.echo(json.dumps([p.model_dump() for p in properties], indent=2))


@app.command("deliver")
def deliver(
    file: Annotated[Path, typer.Argument(help="JSON file describing the message unit.")],
    url: Annotated[str, typer.Option("--url", help="Base URL of the back-end.")],
    timeout: Annotated[
        int, typer.Option("--timeout", help="Connect and response timeout in ms.")
    ] = DEFAULT_TIMEOUT_MS,
) -> None:
    """Deliver a User Message or notify a Signal to the back-end."""
    message_unit = _load_message_unit(file)
    try:
        client = DeliveryClient(url, timeout)
        client.deliver(message_unit)
    except (ConfigurationError, DeliveryError) as exc:
        typer.echo(f"Delivery failed: {exc.message}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"Delivered {message_unit.kind} to {client.url_for(message_unit)}")


def main() -> None:
    """Run the CLI."""
    app()


if __name__ == "__main__":
    main()
