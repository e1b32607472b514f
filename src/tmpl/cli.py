"""CLI entrypoint.

Commands:
- tmpl save <name> <source_dir> [--tags a,b]
- tmpl make <name> <destination>
- tmpl list [--tags a,b] [--json]
- tmpl delete <name>
- tmpl tag add|remove <name> <a,b>
- tmpl help / tmpl version

CONTRACT
- Inputs: Command line arguments (parsed by Typer)
- Outputs (required):
  - Exit code 0 on success, 1 on precondition failures, 2 on usage and
    environment errors
  - Console output (stdout/stderr) with fixed, human-readable messages
- Invariants:
  - The store path is resolved at command entry and passed to TemplateStore
  - Names and arity are validated before the store is touched
- Failure:
  - Invalid arguments raise Typer exit/error
  - StoreError is printed and exits 1
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from . import __version__
from .config import load_settings
from .messages import (
    EXIT_FAILURE,
    EXIT_USAGE,
    HELP_TEXT,
    entry_line,
    exit_code,
    list_header,
    no_matches,
    no_templates,
    render,
)
from .store import Outcome, StoreError, TemplateStore
from .util.names import InvalidTemplateName, validate_template_name
from .util.paths import HomeNotFoundError
from .util.tags import parse_tags

app = typer.Typer(add_completion=False, help="Save, instantiate and tag directory templates.")
tag_app = typer.Typer(add_completion=False, help="Add or remove tags on a stored template.")
app.add_typer(tag_app, name="tag")

console = Console()
err_console = Console(stderr=True)


def _stderr_sink(message) -> None:
    sys.stderr.write(message)


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(_stderr_sink, level="DEBUG" if verbose else "WARNING", format="{level}: {message}")


def _version_callback(value: bool):
    if value:
        console.print(f"tmpl version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log filesystem operations."),
):
    configure_logging(verbose)


_NAME_ARGUMENT = typer.Argument(..., help="Template name.", show_default=False)
_TAGS_OPTION = typer.Option(
    None,
    "--tags",
    help="Comma-separated tags, e.g. web,api.",
)


def _print(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _print_err(text: str) -> None:
    err_console.print(text, markup=False, highlight=False, soft_wrap=True)


def _open_store() -> TemplateStore:
    try:
        settings = load_settings(os.environ)
    except HomeNotFoundError as e:
        _print_err(f"Error: {e}")
        raise typer.Exit(code=EXIT_USAGE) from e
    logger.debug(f"Template store: {settings.store_dir}")
    return TemplateStore(settings.store_dir)


def _check_name(name: str) -> str:
    try:
        return validate_template_name(name)
    except InvalidTemplateName as e:
        raise typer.BadParameter(str(e), param_hint="'NAME'") from e


def _finish(outcome: Outcome) -> None:
    if outcome.ok:
        _print(render(outcome))
        return
    _print_err(render(outcome))
    raise typer.Exit(code=exit_code(outcome))


def _run(action, *args) -> Outcome:
    try:
        return action(*args)
    except StoreError as e:
        _print_err(f"Error: {e}")
        raise typer.Exit(code=EXIT_FAILURE) from e


@app.command()
def save(
    name: str = _NAME_ARGUMENT,
    source_dir: Path = typer.Argument(..., help="Directory to capture.", show_default=False),
    tags: str | None = _TAGS_OPTION,
) -> None:
    """Save a directory as a new template."""
    _check_name(name)
    tag_list = parse_tags(tags)
    store = _open_store()
    _finish(_run(store.save, name, source_dir, tag_list))


@app.command()
def make(
    name: str = _NAME_ARGUMENT,
    destination: Path = typer.Argument(..., help="New directory to create.", show_default=False),
) -> None:
    """Create a new project directory from a template."""
    _check_name(name)
    store = _open_store()
    _finish(_run(store.make, name, destination))


@app.command("list")
def list_cmd(
    tags: str | None = _TAGS_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print templates as JSON."),
) -> None:
    """List stored templates, optionally only those carrying any of --tags."""
    filter_tags = parse_tags(tags)
    store = _open_store()
    try:
        everything = store.list_templates()
    except OSError as e:
        _print_err(f"Error: cannot read {store.root}: {e}")
        raise typer.Exit(code=EXIT_FAILURE) from e

    entries = [e for e in everything if e.matches(filter_tags)]
    if as_json:
        console.print_json(data=[e.model_dump() for e in entries])
        return
    if not entries:
        if everything:
            _print(no_matches(filter_tags))
        else:
            _print(no_templates(store.root))
        return

    _print(list_header(store.root))
    for entry in entries:
        _print(entry_line(entry))


@app.command()
def delete(
    name: str = _NAME_ARGUMENT,
) -> None:
    """Delete a template."""
    _check_name(name)
    store = _open_store()
    _finish(_run(store.delete, name))


@tag_app.command("add")
def tag_add(
    name: str = _NAME_ARGUMENT,
    tags: str = typer.Argument(..., help="Comma-separated tags to add.", show_default=False),
) -> None:
    """Append tags that the template does not have yet."""
    _check_name(name)
    store = _open_store()
    _finish(_run(store.add_tags, name, parse_tags(tags)))


@tag_app.command("remove")
def tag_remove(
    name: str = _NAME_ARGUMENT,
    tags: str = typer.Argument(..., help="Comma-separated tags to remove.", show_default=False),
) -> None:
    """Drop tags from the template."""
    _check_name(name)
    store = _open_store()
    _finish(_run(store.remove_tags, name, parse_tags(tags)))


@app.command("help")
def help_cmd() -> None:
    """Show usage for every command."""
    _print(HELP_TEXT)


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"tmpl version: {__version__}")


if __name__ == "__main__":
    app()
