from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from viewkit.config import RenderingSettings
from viewkit.exceptions import ViewkitError
from viewkit.rendering.kernel import RenderingKernel
from viewkit.utilities.logger import configure_cli_logging

app = typer.Typer(help="Compile and render viewkit templates")

console = Console()
error_console = Console(stderr=True)

ViewsOption = typer.Option(
    None, "--views", help="Template root (defaults to VIEWKIT_VIEWS_DIRECTORY)"
)
CacheOption = typer.Option(
    None, "--cache", help="Compiled template cache (defaults to VIEWKIT_CACHE_DIRECTORY)"
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _fail(message: str) -> typer.Exit:
    error_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)
    return typer.Exit(code=1)


def _load_kernel(views: Path | None, cache: Path | None, verbose: bool) -> RenderingKernel:
    configure_cli_logging(verbose)

    overrides: dict[str, Any] = {}
    if views is not None:
        overrides["views_directory"] = views
    if cache is not None:
        overrides["cache_directory"] = cache

    try:
        settings = RenderingSettings(**overrides)
        return RenderingKernel.from_settings(settings)
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise _fail(f"Invalid settings ({missing}); pass --views/--cache or set VIEWKIT_*")
    except ViewkitError as e:
        raise _fail(str(e))


def load_data(data: str | None, data_file: Path | None) -> dict[str, Any]:
    """Merge template data from a file and an inline JSON object (inline wins)."""
    merged: dict[str, Any] = {}

    if data_file is not None:
        try:
            text = data_file.read_text(encoding="utf-8")
        except OSError as e:
            raise _fail(f"Could not read data file {data_file}: {e}")
        try:
            if data_file.suffix.lower() in (".yaml", ".yml"):
                loaded = yaml.safe_load(text)
            else:
                loaded = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise _fail(f"Could not parse data file {data_file}: {e}")
        if loaded is not None and not isinstance(loaded, dict):
            raise _fail(f"Data file {data_file} must contain a mapping")
        merged.update(loaded or {})

    if data:
        try:
            inline = json.loads(data)
        except json.JSONDecodeError as e:
            raise _fail(f"--data is not valid JSON: {e}")
        if not isinstance(inline, dict):
            raise _fail("--data must be a JSON object")
        merged.update(inline)

    return merged


@app.command("compile")
def compile_template(
    template_id: str = typer.Argument(..., help="Template id, e.g. 'pages/home'"),
    views: Path | None = ViewsOption,
    cache: Path | None = CacheOption,
    verbose: bool = VerboseOption,
):
    """Print the compiled Jinja2 source of a template."""
    kernel = _load_kernel(views, cache, verbose)
    try:
        compiled = kernel.compile(template_id)
    except ViewkitError as e:
        raise _fail(str(e))
    typer.echo(compiled, nl=False)


@app.command()
def render(
    template_id: str = typer.Argument(..., help="Template id, e.g. 'pages/home'"),
    data: str | None = typer.Option(None, "--data", "-d", help="Template data as a JSON object"),
    data_file: Path | None = typer.Option(
        None, "--data-file", "-f", help="JSON or YAML file with template data"
    ),
    views: Path | None = ViewsOption,
    cache: Path | None = CacheOption,
    verbose: bool = VerboseOption,
):
    """Render a template in isolation and print the output."""
    kernel = _load_kernel(views, cache, verbose)
    context = load_data(data, data_file)
    try:
        output = kernel.render_template(template_id, context)
    except ViewkitError as e:
        raise _fail(str(e))
    typer.echo(output, nl=False)


@app.command()
def warm(
    views: Path | None = ViewsOption,
    cache: Path | None = CacheOption,
    verbose: bool = VerboseOption,
):
    """Precompile every template under the views root."""
    kernel = _load_kernel(views, cache, verbose)
    results = kernel.warm()

    table = Table(title="Compiled templates")
    table.add_column("Template", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Artifact / error", overflow="fold")
    for result in results:
        if result.ok:
            table.add_row(result.template_id, "[green]ok[/green]", str(result.compiled_path))
        else:
            table.add_row(result.template_id, "[red]failed[/red]", escape(result.error or ""))
    console.print(table)

    failures = [result for result in results if not result.ok]
    console.print(
        f"{len(results) - len(failures)} compiled, {len(failures)} failed", highlight=False
    )
    if failures:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
