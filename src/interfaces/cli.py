"""Command-line interface for the Allfiled mapping."""

from __future__ import annotations

import typer
from dotenv import load_dotenv

from composition_root import bootstrap_mapping, configure_logging
from domain.exceptions import ConfigurationError, InvalidArgumentError

# --- Environment Loading ---
load_dotenv()

EXIT_NO_MAPPING = 1
EXIT_INVALID = 2
EXIT_CONFIGURATION = 3


# --- Typer App ---
app = typer.Typer(
    help="Map identifiers between Allfiled data XRIs and XDI data XRIs.",
    add_completion=False,
)


def _mapping():
    configure_logging()
    try:
        return bootstrap_mapping()
    except ConfigurationError as ex:
        typer.echo(f"Mapping graph could not be loaded: {ex}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION)


# --- CLI Commands ---


@app.command("to-xdi")
def to_xdi(xri: str):
    """Maps an Allfiled data XRI to an XDI data XRI."""
    mapping = _mapping()
    try:
        result = mapping.allfiled_data_xri_to_xdi_data_xri(xri)
    except InvalidArgumentError as ex:
        typer.echo(f"Invalid XRI: {ex}", err=True)
        raise typer.Exit(code=EXIT_INVALID)
    except ConfigurationError as ex:
        typer.echo(f"Mapping graph is inconsistent: {ex}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION)

    if result is None:
        typer.echo(f"No mapping for {xri}", err=True)
        raise typer.Exit(code=EXIT_NO_MAPPING)
    typer.echo(str(result))


@app.command("to-allfiled")
def to_allfiled(xri: str):
    """Maps an XDI data XRI to an Allfiled data XRI."""
    mapping = _mapping()
    try:
        result = mapping.xdi_data_xri_to_allfiled_data_xri(xri)
    except InvalidArgumentError as ex:
        typer.echo(f"Invalid XRI: {ex}", err=True)
        raise typer.Exit(code=EXIT_INVALID)
    except ConfigurationError as ex:
        typer.echo(f"Mapping graph is inconsistent: {ex}", err=True)
        raise typer.Exit(code=EXIT_CONFIGURATION)

    if result is None:
        typer.echo(f"No mapping for {xri}", err=True)
        raise typer.Exit(code=EXIT_NO_MAPPING)
    typer.echo(str(result))


@app.command()
def decompose(xri: str):
    """Prints the category, file and field of an Allfiled data XRI."""
    mapping = _mapping()
    try:
        category = mapping.allfiled_data_xri_to_category_identifier(xri)
        file = mapping.allfiled_data_xri_to_file_identifier(xri)
        field = mapping.allfiled_data_xri_to_field_identifier(xri)
    except InvalidArgumentError as ex:
        typer.echo(f"Invalid XRI: {ex}", err=True)
        raise typer.Exit(code=EXIT_INVALID)

    typer.echo(f"category: {category}")
    typer.echo(f"file: {file}")
    typer.echo(f"field: {field}")


@app.command()
def compose(category: str, file: str, field: str):
    """Builds an Allfiled data XRI from category, file and field identifiers."""
    mapping = _mapping()
    try:
        result = mapping.allfiled_identifiers_to_allfiled_data_xri(category, file, field)
    except InvalidArgumentError as ex:
        typer.echo(f"Invalid identifier: {ex}", err=True)
        raise typer.Exit(code=EXIT_INVALID)
    typer.echo(str(result))


if __name__ == "__main__":
    app()
