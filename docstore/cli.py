"""docstore-cli — talk to a running docstore server.

Commands:
    docstore-cli list-collections
    docstore-cli create-collection NAME
    docstore-cli delete-collection NAME
    docstore-cli list-documents COLLECTION
    docstore-cli create-document COLLECTION NAME JSON
    docstore-cli update-document COLLECTION NAME JSON
    docstore-cli get-document COLLECTION NAME
    docstore-cli delete-document COLLECTION NAME
    docstore-cli filter-documents COLLECTION KEY=VALUE...
"""

from __future__ import annotations

import json

import click
import httpx

from docstore.services.client import DEFAULT_SERVER, DocStoreClient

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(ctx: click.Context) -> DocStoreClient:
    return DocStoreClient(ctx.obj["server"])


def _parse_object(raw: str) -> dict:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Failed to parse JSON data: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException("JSON data must be an object")
    return data


def _parse_filters(pairs: tuple[str, ...]) -> dict:
    filters = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="FILTERS")
        filters[key] = value
    return filters


def _call(what: str, fn, *args):
    try:
        return fn(*args)
    except httpx.HTTPError as exc:
        raise click.ClickException(f"Failed to {what}: {exc}") from exc


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--server", "-s",
    envvar="DOCSTORE_SERVER",
    default=DEFAULT_SERVER,
    show_default=True,
    help="Server URL",
)
@click.pass_context
def cli(ctx: click.Context, server: str) -> None:
    """CLI tool for interacting with the docstore server."""
    ctx.ensure_object(dict)
    ctx.obj["server"] = server


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@cli.command("list-collections")
@click.pass_context
def list_collections(ctx: click.Context) -> None:
    """List all collections."""
    collections = _call("list collections", _client(ctx).list_collections)
    click.echo("Collections:")
    for name in collections:
        click.echo(name)


@cli.command("create-collection")
@click.argument("collection")
@click.pass_context
def create_collection(ctx: click.Context, collection: str) -> None:
    """Create a new collection."""
    _call("create collection", _client(ctx).create_collection, collection)
    click.echo(f"Collection {collection} created successfully")


@cli.command("delete-collection")
@click.argument("collection")
@click.pass_context
def delete_collection(ctx: click.Context, collection: str) -> None:
    """Delete a collection and every document in it."""
    _call("delete collection", _client(ctx).delete_collection, collection)
    click.echo(f"Collection {collection} deleted successfully")


@cli.command("list-documents")
@click.argument("collection")
@click.pass_context
def list_documents(ctx: click.Context, collection: str) -> None:
    """List all documents in the specified collection."""
    documents = _call("list documents", _client(ctx).list_documents, collection)
    click.echo(f"Documents in collection {collection}:")
    for name in documents:
        click.echo(name)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@cli.command("create-document")
@click.argument("collection")
@click.argument("document")
@click.argument("json_data")
@click.pass_context
def create_document(ctx: click.Context, collection: str, document: str, json_data: str) -> None:
    """Create a new document in the specified collection."""
    data = _parse_object(json_data)
    saved = _call("create document", _client(ctx).create_document, collection, document, data)
    click.echo(f"Document {document} created successfully in collection {collection}")
    _echo_json(saved)


@cli.command("update-document")
@click.argument("collection")
@click.argument("document")
@click.argument("json_data")
@click.pass_context
def update_document(ctx: click.Context, collection: str, document: str, json_data: str) -> None:
    """Merge fields into an existing document."""
    data = _parse_object(json_data)
    saved = _call("update document", _client(ctx).update_document, collection, document, data)
    click.echo(f"Document {document} updated successfully in collection {collection}")
    _echo_json(saved)


@cli.command("get-document")
@click.argument("collection")
@click.argument("document")
@click.pass_context
def get_document(ctx: click.Context, collection: str, document: str) -> None:
    """Print a document."""
    _echo_json(_call("get document", _client(ctx).get_document, collection, document))


@cli.command("delete-document")
@click.argument("collection")
@click.argument("document")
@click.pass_context
def delete_document(ctx: click.Context, collection: str, document: str) -> None:
    """Delete a document from the specified collection."""
    _call("delete document", _client(ctx).delete_document, collection, document)
    click.echo(f"Document {document} deleted successfully from collection {collection}")


@cli.command("filter-documents")
@click.argument("collection")
@click.argument("filters", nargs=-1)
@click.pass_context
def filter_documents(ctx: click.Context, collection: str, filters: tuple[str, ...]) -> None:
    """Print documents whose fields equal every KEY=VALUE given.

    Values that look like JSON scalars (1, true, null) are compared as such.
    """
    predicate = _parse_filters(filters)
    _echo_json(_call("filter documents", _client(ctx).filter_documents, collection, predicate))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
