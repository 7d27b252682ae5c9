"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdlogseq.client.api import LogseqClient
from mdlogseq.client.errors import LogseqError
from mdlogseq.client.memory import MemoryClient
from mdlogseq.config import Settings, load_config
from mdlogseq.core.models import BlockNode, InsertPosition
from mdlogseq.core.pipeline import run_insert, run_outline, run_parse


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
    ):
    """Markdown to Logseq block outlines."""
    settings = _settings()
    logging.basicConfig(
        level="DEBUG" if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _dump_nodes(nodes: list[BlockNode]) -> str:
    return json.dumps([n.model_dump() for n in nodes], indent=2, ensure_ascii=False)


def parse_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Markdown file to parse")],
    nesting: Annotated[Optional[int], typer.Option("--max-nesting", help="Deepest list level kept")] = None,
    no_html: Annotated[bool, typer.Option("--no-html", help="Drop raw HTML blocks")] = False,
    no_sanitize: Annotated[bool, typer.Option("--no-sanitize", help="Keep HTML unsanitized")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Print the flat typed block list for a markdown file as JSON."""
    settings = _settings(overrides={
        "max_nesting_level": nesting,
        "allow_html": False if no_html else None,
        "sanitize_html": False if no_sanitize else None,
        "parser_config": parser,
    })
    try:
        blocks = run_parse(path, settings.parse_config(), settings.parser_config)
    except ValueError as e:
        _fail(f"Failed to parse {path}", e)
    typer.echo(json.dumps(
        [b.model_dump(mode="json", exclude_none=True) for b in blocks], indent=2, ensure_ascii=False,
    ))


def outline_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Markdown file to outline")],
    mode: Annotated[str, typer.Option("--mode", help="readable or compact")] = "readable",
    ):
    """Print the block tree that insert would create, as JSON."""
    _settings()
    if mode not in ("readable", "compact"):
        _fail(f"Unknown mode '{mode}'; use readable or compact")
    try:
        roots = run_outline(path, mode)
    except ValueError as e:
        _fail(f"Failed to parse {path}", e)
    typer.echo(_dump_nodes(roots))


def insert_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Markdown file to insert")],
    page: Annotated[str, typer.Option("--page", help="Target page name (or block uuid)")],
    after: Annotated[Optional[str], typer.Option("--after", help="Insert after this block uuid")] = None,
    before: Annotated[Optional[str], typer.Option("--before", help="Insert before this block uuid")] = None,
    parent: Annotated[Optional[str], typer.Option("--parent", help="Insert as children of this block uuid")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Insert into an in-memory outline and print it")] = False,
    api_url: Annotated[Optional[str], typer.Option("--api-url", help="Logseq HTTP API URL")] = None,
    ):
    """Insert a markdown file into a Logseq page, one block at a time."""
    if sum(1 for v in (after, before, parent) if v) > 1:
        _fail("Use at most one of --after, --before, --parent")
    settings = _settings(overrides={"api_url": api_url})
    position = InsertPosition(after_block_id=after, before_block_id=before, parent_block_id=parent)

    if dry_run:
        client = MemoryClient()
        for anchor in (after, before, parent):
            if anchor:
                client.add_placeholder(page, anchor)
        try:
            created, total = run_insert(client, page, path, position)
        except ValueError as e:
            _fail(f"Failed to parse {path}", e)
        typer.echo(_dump_nodes(client.outline(page)))
    else:
        try:
            with LogseqClient.from_settings(settings) as client:
                created, total = run_insert(client, page, path, position)
        except ValueError as e:
            _fail(f"Failed to parse {path}", e)
        except LogseqError as e:
            _fail("Insert failed", e)

    # dry runs keep stdout to the JSON outline
    for uuid in created:
        typer.echo(f"  {uuid}", err=dry_run)
    typer.echo(f"Inserted {len(created)} of {total} root block(s) into {page}", err=dry_run)
    if len(created) < total:
        raise typer.Exit(2)


def check_cmd(
    api_url: Annotated[Optional[str], typer.Option("--api-url", help="Logseq HTTP API URL")] = None,
    ):
    """Check that the Logseq HTTP API is reachable."""
    settings = _settings(overrides={"api_url": api_url})
    with LogseqClient.from_settings(settings) as client:
        ok = client.test_connection()
    if not ok:
        _fail(f"Logseq API not reachable at {settings.api_url}")
    typer.echo(f"Connected to {settings.api_url}")
