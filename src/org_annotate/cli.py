"""Command-line interface for org-annotate.

Provides commands for adding, removing, listing and exporting annotations
in Org files from the terminal.
"""

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .buffer import OrgBuffer
from .commands import AnnotationCommands
from .config import load_config
from .errors import TextNotFoundError
from .models.marker import MarkerKind
from .scope import Scope
from .view import fit, to_table

app = typer.Typer(
    name="org-annotate",
    help="Annotate Org documents with notes and comments stored as links.",
    no_args_is_help=True,
)

FileArg = Annotated[Path, typer.Argument(help="Path to the .org file")]
KindOpt = Annotated[
    str | None, typer.Option("--kind", "-k", help="Annotation kind: note or comment")
]
ConfigOpt = Annotated[
    Path | None, typer.Option("--config", "-c", help="YAML configuration file")
]
AtOpt = Annotated[int | None, typer.Option("--at", help="Character offset in the file")]
OnOpt = Annotated[str | None, typer.Option("--on", help="Locate by the first occurrence of text")]
OutputOpt = Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")]
SectionOpt = Annotated[
    str | None, typer.Option("--section", "-s", help="Limit to the subtree of this heading")
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"org-annotate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Annotate Org documents with notes and comments stored as links."""
    pass


def _commands(config_path: Path | None, kind: str | None) -> AnnotationCommands:
    config = load_config(config_path)
    if kind:
        config = replace(config, kind=MarkerKind.from_name(kind))
    return AnnotationCommands(config)


def _find(buffer: OrgBuffer, text: str) -> int:
    offset = buffer.text.find(text)
    if offset < 0:
        raise TextNotFoundError(
            text,
            suggestions=[
                "Check spelling and whitespace",
                "Text inside a link is matched against the raw link syntax",
                "Use --at with a character offset instead",
            ],
        )
    return offset


def _locate(buffer: OrgBuffer, at: int | None, on: str | None) -> int:
    if at is not None and on is not None:
        raise ValueError("Cannot specify both --at and --on")
    if on is not None:
        return _find(buffer, on)
    if at is None:
        raise ValueError("Must specify either --at or --on")
    return at


def _scope(buffer: OrgBuffer, section: str | None) -> Scope | None:
    return Scope.parse(buffer, f"section:{section}") if section else None


@app.command()
def add(
    file: FileArg,
    body: Annotated[str, typer.Option("--body", "-b", help="Annotation text")],
    on: Annotated[
        str | None, typer.Option("--on", help="Annotate the first occurrence of this text")
    ] = None,
    at: AtOpt = None,
    kind: KindOpt = None,
    config: ConfigOpt = None,
    output: OutputOpt = None,
) -> None:
    """Attach an annotation to some text, or insert one at an offset."""
    try:
        commands = _commands(config, kind)
        buffer = OrgBuffer.from_file(file)
        if on is not None:
            start = _find(buffer, on)
            buffer.set_region(start, start + len(on))
        elif at is not None:
            buffer.point = at
        else:
            raise ValueError("Must specify either --on or --at")
        commands.insert(buffer, body)
        output_path = buffer.save(output)
        typer.echo(f"Added {commands.kind.prefix} and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def delete(
    file: FileArg,
    at: AtOpt = None,
    on: OnOpt = None,
    kind: KindOpt = None,
    config: ConfigOpt = None,
    output: OutputOpt = None,
) -> None:
    """Remove the annotation at a position, keeping its text."""
    try:
        commands = _commands(config, kind)
        buffer = OrgBuffer.from_file(file)
        commands.delete(buffer, _locate(buffer, at, on))
        output_path = buffer.save(output)
        typer.echo(f"Deleted {commands.kind.prefix} and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list")
def list_annotations(
    file: FileArg,
    section: SectionOpt = None,
    kind: KindOpt = None,
    config: ConfigOpt = None,
) -> None:
    """List annotations in the file or in one subtree."""
    try:
        commands = _commands(config, kind)
        buffer = OrgBuffer.from_file(file)
        state = commands.list(buffer, _scope(buffer, section))
        if state is None:
            typer.echo(f"No {commands.kind.prefix}s found")
            return

        text_column, body_column = state.columns
        width = text_column.width
        typer.echo(f"{fit(text_column.title, width)}  {body_column.title}")
        for text, note in state.entries():
            typer.echo(f"{fit(text, width)}  {note}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def table(
    file: FileArg,
    section: SectionOpt = None,
    tsv: Annotated[
        bool, typer.Option("--tsv", help="Print tab-separated values instead of an Org table")
    ] = False,
    kind: KindOpt = None,
    config: ConfigOpt = None,
) -> None:
    """Print the annotation list as an Org table."""
    try:
        commands = _commands(config, kind)
        buffer = OrgBuffer.from_file(file)
        scope = _scope(buffer, section)
        if tsv:
            state = commands.views.open(buffer, scope, commands.kind)
            typer.echo(to_table(state), nl=False)
        else:
            typer.echo(commands.export_list_as_table(buffer, scope), nl=False)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def show(
    file: FileArg,
    at: AtOpt = None,
    on: OnOpt = None,
    kind: KindOpt = None,
    config: ConfigOpt = None,
) -> None:
    """Print the body of the annotation at a position."""
    try:
        commands = _commands(config, kind)
        buffer = OrgBuffer.from_file(file)
        commands.follow(buffer, _locate(buffer, at, on))
        typer.echo(commands.popup.content)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def export(
    file: FileArg,
    backend: Annotated[str, typer.Option("--backend", "-b", help="Export backend, e.g. html")],
    kind: KindOpt = None,
    config: ConfigOpt = None,
    output: OutputOpt = None,
) -> None:
    """Render annotations for an export backend."""
    try:
        commands = _commands(config, kind)
        buffer = OrgBuffer.from_file(file)
        result = commands.export(buffer, backend)
        if output is None:
            typer.echo(result, nl=False)
        else:
            output.write_text(result, encoding="utf-8")
            typer.echo(f"Exported to {output}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
