"""CLI entry point for openapi-spec-converter."""

import logging
from pathlib import Path

import click

from openapi_spec_converter import codec
from openapi_spec_converter.dialect import Dialect
from openapi_spec_converter.errors import ConverterError
from openapi_spec_converter.migrate.orchestrator import convert_document

LOGGER_NAME = "openapi_spec_converter"

TARGET_CHOICES = [d.cli_name for d in Dialect]
FORMAT_CHOICES = [n.value for n in codec.Notation]


def _configure_logging(debug: bool) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def _read_input(input_path: Path | None) -> bytes:
    """Read the input file, or stdin when no file (or ``-``) is given."""
    if input_path is not None and str(input_path) != "-":
        return input_path.read_bytes()

    stdin = click.get_binary_stream("stdin")
    if input_path is None and stdin.isatty():
        raise click.UsageError("No input filename or open stdin pipe")
    return stdin.read()


@click.command()
@click.argument(
    "input_path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output file (default stdout).")
@click.option("-t", "--target", default="3.1", envvar="OPENAPI_CONVERTER_TARGET", show_default=True, type=click.Choice(TARGET_CHOICES, case_sensitive=False), help="Target version.")
@click.option("-f", "--format", "fmt", default="json", envvar="OPENAPI_CONVERTER_FORMAT", show_default=True, type=click.Choice(FORMAT_CHOICES, case_sensitive=False), help="Output format.")
@click.option("--debug", is_flag=True, help="Log each conversion step to stderr.")
def main(input_path: Path | None, output: Path | None, target: str, fmt: str, debug: bool):
    """Convert a Swagger 2.0 / OpenAPI 3.0 / OpenAPI 3.1 document to another version."""
    _configure_logging(debug)

    data = _read_input(input_path)

    try:
        data = convert_document(data, Dialect.from_name(target))
        data = codec.convert(data, codec.Notation(fmt.lower()))
    except ConverterError as e:
        raise click.ClickException(f"Error converting document: {e}") from e

    if output is not None:
        try:
            output.write_bytes(data)
        except OSError as e:
            raise click.ClickException(f"Error writing output file: {e}") from e
    else:
        click.echo(data.decode("utf-8"))
