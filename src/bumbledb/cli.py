"""bumbledb CLI: NDJSON document store on the command line.

Commands:
    bumbledb init                      create bumbledb.toml + data dir
    bumbledb collections               list collection names
    bumbledb find NAME [QUERY]         print matching documents as NDJSON
    bumbledb insert NAME [DOC ...]     insert documents (args or NDJSON on stdin)
    bumbledb update NAME QUERY DOC     replace every match with DOC
    bumbledb delete NAME QUERY         delete every match
    bumbledb drop NAME                 drop one collection
    bumbledb drop-db                   drop every collection

QUERY and DOC are JSON, e.g. '{"address.country": "Pakistan"}'.
"""

from __future__ import annotations

import contextlib
import itertools
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from bumbledb.codec import SKIP, decode, encode
from bumbledb.config import BumbleConfig, init_config, load_config
from bumbledb.database import Database, open_database
from bumbledb.errors import BumbleDBError

if TYPE_CHECKING:
    from collections.abc import Iterator

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg(ctx: click.Context) -> BumbleConfig:
    try:
        cfg = load_config(ctx.obj["root"])
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    if ctx.obj["data_dir"] is not None:
        cfg.data_dir = ctx.obj["data_dir"]
    return cfg


def _setup_logging(cfg: BumbleConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(message)s")


def _open_db(ctx: click.Context) -> Database:
    cfg = _load_cfg(ctx)
    _setup_logging(cfg, ctx.obj["verbose"])
    with _store_errors():
        return open_database(cfg.data_dir)


@contextlib.contextmanager
def _store_errors() -> Iterator[None]:
    """Turn store and filesystem failures into a one-line CLI error."""
    try:
        yield
    except (BumbleDBError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


def _parse_json(value: str, param: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc.msg}", param_hint=param) from exc


def _parse_query(value: str | None) -> dict[str, Any]:
    if value is None:
        return {}
    query = _parse_json(value, "QUERY")
    if not isinstance(query, dict):
        raise click.BadParameter("must be a JSON object", param_hint="QUERY")
    return query


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="bumbledb")
@click.option("--dir", "root", default=None, help="Project root (default: search upward for bumbledb.toml)")
@click.option(
    "--data-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Override the configured data directory",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, root: str | None, data_dir: Path | None, verbose: bool) -> None:
    """bumbledb: embedded NDJSON document store."""
    ctx.ensure_object(dict)
    ctx.obj.update(root=root, data_dir=data_dir, verbose=verbose)


# ---------------------------------------------------------------------------
# bumbledb init
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--data", "data_rel", default=None, help="data_dir to write into bumbledb.toml")
@click.pass_context
def init(ctx: click.Context, data_rel: str | None) -> None:
    """Create bumbledb.toml and the data directory."""
    root_path = Path(ctx.obj["root"] or ".").resolve()
    try:
        config_path = init_config(root_path, data_dir=data_rel)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("bumbledb.toml already exists, skipping init")
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--data") from exc

    ctx.obj["root"] = str(root_path)
    db = _open_db(ctx)
    click.echo(f"Data dir : {db.data_dir}")


# ---------------------------------------------------------------------------
# bumbledb collections / find
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def collections(ctx: click.Context) -> None:
    """List collection names, one per line."""
    db = _open_db(ctx)
    with _store_errors():
        names = db.collections()
    for name in names:
        click.echo(name)


@cli.command()
@click.argument("name")
@click.argument("query", required=False)
@click.option("--one", is_flag=True, help="Print only the first match")
@click.option(
    "--limit", "-l", default=0, show_default=True, type=click.IntRange(min=0), help="Max documents to print (0 = all)"
)
@click.pass_context
def find(ctx: click.Context, name: str, query: str | None, one: bool, limit: int) -> None:
    """Print documents in NAME matching QUERY as NDJSON."""
    q = _parse_query(query)
    db = _open_db(ctx)
    with _store_errors():
        coll = db.collection(name)
        if one:
            doc = coll.find_one(q)
            if doc is None:
                raise click.ClickException("No matching document")
            click.echo(encode(doc))
            return
        with contextlib.closing(iter(coll.find(q))) as docs:
            for doc in itertools.islice(docs, limit or None):
                click.echo(encode(doc))


# ---------------------------------------------------------------------------
# bumbledb insert / update / delete
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name")
@click.argument("docs", nargs=-1)
@click.pass_context
def insert(ctx: click.Context, name: str, docs: tuple[str, ...]) -> None:
    """Insert DOCS into NAME. Reads NDJSON from stdin when no DOC is given."""
    if docs:
        parsed = [_parse_json(d, "DOC") for d in docs]
    else:
        parsed = []
        for lineno, line in enumerate(click.get_text_stream("stdin"), start=1):
            try:
                doc = decode(line)
            except json.JSONDecodeError as exc:
                raise click.ClickException(f"stdin:{lineno}: not valid JSON: {exc.msg}") from exc
            if doc is not SKIP:
                parsed.append(doc)

    db = _open_db(ctx)
    with _store_errors():
        inserted = db.collection(name).insert_many(parsed)
    click.echo(f"Inserted {len(inserted)} document(s) into {name}")


@cli.command()
@click.argument("name")
@click.argument("query")
@click.argument("doc")
@click.pass_context
def update(ctx: click.Context, name: str, query: str, doc: str) -> None:
    """Replace every document in NAME matching QUERY with DOC."""
    q = _parse_query(query)
    replacement = _parse_json(doc, "DOC")
    db = _open_db(ctx)
    with _store_errors():
        result = db.collection(name).update(q, replacement)
    click.echo(encode(result))


@cli.command()
@click.argument("name")
@click.argument("query")
@click.pass_context
def delete(ctx: click.Context, name: str, query: str) -> None:
    """Delete every document in NAME matching QUERY."""
    q = _parse_query(query)
    db = _open_db(ctx)
    with _store_errors():
        n = db.collection(name).delete(q)
    click.echo(f"Deleted {n} document(s) from {name}")


# ---------------------------------------------------------------------------
# bumbledb drop / drop-db
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name")
@click.pass_context
def drop(ctx: click.Context, name: str) -> None:
    """Drop collection NAME (no error if it does not exist)."""
    db = _open_db(ctx)
    with _store_errors():
        db.collection(name).drop()
    click.echo(f"Dropped {name}")


@cli.command("drop-db")
@click.confirmation_option(prompt="Drop every collection in the database?")
@click.pass_context
def drop_db(ctx: click.Context) -> None:
    """Drop every collection; the data directory is recreated empty."""
    db = _open_db(ctx)
    with _store_errors():
        db.drop()
    click.echo(f"Dropped database at {db.data_dir}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
