"""CLI entry point for api-collection."""

from pathlib import Path

import click

from api_collection.config import settings
from api_collection.log import configure_logging
from api_collection.descriptor.base import DescriptorSet
from api_collection.descriptor.config import load_descriptors
from api_collection.descriptor.detect import detect_format
from api_collection.descriptor.errors import DescriptorError
from api_collection.descriptor.openapi import parse_openapi
from api_collection.descriptor.postman import parse_postman
from api_collection.collection.builder import build_document
from api_collection.collection.validator import validate_collection
from api_collection.collection.writer import write_collection

FORMATS = ["auto", "descriptors", "openapi", "postman"]


def _load(file_path: Path, fmt: str, base_url: str | None = None) -> DescriptorSet:
    """Read endpoint descriptors based on format."""
    if fmt == "auto":
        fmt = detect_format(file_path)

    try:
        if fmt == "openapi":
            return parse_openapi(file_path, base_url=base_url)
        elif fmt == "postman":
            loaded = parse_postman(file_path)
        else:
            loaded = load_descriptors(file_path)
    except DescriptorError as e:
        raise click.ClickException(str(e)) from e

    if base_url:
        loaded = DescriptorSet(
            name=loaded.name,
            descriptors=[d.model_copy(update={"base_url": base_url}) for d in loaded.descriptors],
        )
    return loaded


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool):
    """API Collection: build Postman v2.1 collections from endpoint descriptors."""
    configure_logging("DEBUG" if verbose else settings.log_level)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file path for the collection JSON.")
@click.option("--name", default=None, help="Collection name (defaults to the name found in the source).")
@click.option("--base-url", default=None, help="Override the base URL of every endpoint.")
@click.option("--format", "fmt", default="auto", type=click.Choice(FORMATS), help="Source format.")
@click.option("--indent", default=None, type=click.IntRange(min=0), help="JSON indentation (0 for compact).")
def build(doc_path: Path, output: Path, name: str | None, base_url: str | None, fmt: str, indent: int | None):
    """Build a Postman collection from an endpoint source file."""
    click.echo(f"Reading {doc_path} (format: {fmt})...")
    loaded = _load(doc_path, fmt, base_url)
    click.echo(f"Found {len(loaded.descriptors)} endpoints.")

    collection = build_document(name or loaded.name or settings.default_name, loaded.descriptors)

    if indent is None:
        indent = settings.indent
    write_collection(collection, output, indent=indent or None)
    click.echo(f"Collection saved to {output}")

    errors = validate_collection(output.read_text(encoding="utf-8"))
    if errors:
        for err in errors:
            click.echo(f"  {err}", err=True)
        raise click.ClickException(f"Written collection failed validation ({len(errors)} problems)")


@main.command()
@click.argument("collection_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(collection_path: Path):
    """Check that a collection file is a well-formed v2.1.0 collection."""
    errors = validate_collection(collection_path.read_text(encoding="utf-8"))
    if errors:
        for err in errors:
            click.echo(f"  {err}")
        raise click.ClickException(f"{collection_path}: {len(errors)} problems")
    click.echo(f"{collection_path}: OK")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default="auto", type=click.Choice(FORMATS), help="Source format.")
def show(doc_path: Path, fmt: str):
    """List the endpoints a build would turn into collection items."""
    loaded = _load(doc_path, fmt)
    for d in loaded.descriptors:
        click.echo(f"{d.method} {d.path}")
