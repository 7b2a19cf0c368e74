"""site-builder build command - build an archive locally without publishing."""

import shutil
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...build.config_injector import inject_configuration
from ...build.executor import BuildExecutor
from ...build.extractors import ExtractorType, get_extractor
from ...core.exceptions import PipelineError
from ...core.scratch import scratch_directory
from ...models import SiteConfiguration
from ...publish.publisher import collect_artifacts

console = Console()


def load_site_config(path: Path) -> SiteConfiguration:
    """Read a site configuration JSON file, exiting with a message if invalid."""
    if not path.is_file():
        console.print(f"[red]Error:[/red] Config file not found: {path}")
        raise typer.Exit(1)

    try:
        return SiteConfiguration.model_validate_json(path.read_text())
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid site configuration in {path}:\n{escape(str(e))}")
        raise typer.Exit(1)


def build_command(
    archive: Path,
    config_path: Path,
    output: Path,
    extractor: ExtractorType = ExtractorType.ZIPFILE,
    force: bool = False,
):
    """
    Extract, configure and compile a site archive into a local directory.

    Runs the same stages as the deployed function, minus download and publish.
    """
    if not archive.is_file():
        console.print(f"[red]Error:[/red] Archive not found: {archive}")
        raise typer.Exit(1)

    if output.exists():
        if not force:
            console.print(
                f"[red]Error:[/red] {output} already exists (use --force to replace it)"
            )
            raise typer.Exit(1)
        shutil.rmtree(output)

    site_config = load_site_config(config_path)

    try:
        with scratch_directory() as workdir:
            source_dir = workdir / "source"

            with console.status("Extracting archive..."):
                get_extractor(extractor).extract(archive.read_bytes(), source_dir)
            console.print(f"[green]✓[/green] Extracted {archive.name}")

            inject_configuration(site_config, source_dir)
            console.print("[green]✓[/green] Wrote environment configuration")

            with console.status("Building site..."):
                output_dir = BuildExecutor().build(source_dir)
            console.print("[green]✓[/green] Build completed")

            shutil.copytree(output_dir, output)
    except PipelineError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _display_artifacts(output)


def _display_artifacts(output: Path) -> None:
    artifacts = collect_artifacts(output)

    table = Table(title=f"Publishable files in {output}")
    table.add_column("Key", style="cyan")
    table.add_column("Content-Type")
    table.add_column("Size", justify="right")

    for artifact in artifacts:
        table.add_row(
            artifact.key, artifact.content_type, f"{artifact.size_bytes / 1024:.1f} KB"
        )

    console.print(table)
