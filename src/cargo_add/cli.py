from __future__ import annotations

import logging

import click
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from typer.core import TyperGroup

from cargo_add.config import BUILD_DEPENDENCIES, DEPENDENCIES, DEV_DEPENDENCIES
from cargo_add.manifest import ManifestError
from cargo_add.models import DependencySpec
from cargo_add.service import DependencyService


def _invalid_argument(exc: click.UsageError) -> click.UsageError:
    return click.UsageError(f"Invalid argument: {exc.format_message()}", ctx=exc.ctx)


class CargoAddGroup(TyperGroup):
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            raise _invalid_argument(exc) from exc

    def invoke(self, ctx: click.Context) -> object:
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            raise _invalid_argument(exc) from exc


app = typer.Typer(
    cls=CargoAddGroup,
    help="cargo-add: add dependencies to a Cargo.toml from the command line",
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@app.command("add")
def add(
    crate: str = typer.Argument(..., help="Name of the crate to add"),
    vers: str | None = typer.Option(None, "--vers", help="Version requirement, defaults to *"),
    git: str | None = typer.Option(None, "--git", help="Git repository to depend on"),
    path: str | None = typer.Option(None, "--path", help="Local path to depend on"),
    dev: bool = typer.Option(False, "--dev", "-D", help="Add as a dev dependency"),
    build: bool = typer.Option(False, "--build", "-B", help="Add as a build dependency"),
    optional: bool = typer.Option(False, "--optional", help="Mark the dependency as optional"),
    manifest_path: str | None = typer.Option(
        None,
        "--manifest-path",
        help="Path to the manifest, or a directory to search upwards from",
    ),
) -> None:
    """Add a dependency to the nearest Cargo.toml."""
    if dev and build:
        raise typer.BadParameter("--dev and --build cannot be combined")

    table = DEV_DEPENDENCIES if dev else BUILD_DEPENDENCIES if build else DEPENDENCIES
    try:
        spec = DependencySpec(name=crate, version=vers, git=git, path=path, optional=optional)
        written = DependencyService(manifest_path).add_dependencies(table, [spec])
    except ValidationError as exc:
        console.print(f"[red]Invalid argument: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    except (ManifestError, OSError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    console.print(f"[green]Added {escape(crate)} to \\[{table}][/green] in {escape(str(written))}")


if __name__ == "__main__":
    app()
