"""Main CLI entry point for the site builder."""

from importlib import metadata
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from ..build.extractors import ExtractorType


def get_version() -> str:
    """Get the package version from metadata."""
    try:
        return metadata.version("static-site-builder")
    except metadata.PackageNotFoundError:
        return "unknown"


console = Console()

# command: site-builder
app = typer.Typer(
    name="site-builder",
    help="Build static site archives and publish them to S3",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command("build")
def build_cmd(
    archive: Path = typer.Argument(..., help="Source archive (.zip) to build"),
    config: Path = typer.Option(..., "--config", "-c", help="Site configuration JSON file"),
    output: Path = typer.Option(Path("site-dist"), "--output", "-o", help="Where to copy the build output"),
    extractor: ExtractorType = typer.Option(ExtractorType.ZIPFILE, help="Extraction strategy"),
    force: bool = typer.Option(False, "--force", "-f", help="Replace an existing output directory"),
):
    """Build a site archive locally without publishing it."""
    from .commands.build import build_command
    return build_command(archive, config, output, extractor, force)


@app.command("invoke")
def invoke_cmd(
    event: Path = typer.Argument(..., help="S3 event JSON file"),
):
    """Run the full build-and-publish pipeline for an S3 event."""
    from .commands.invoke import invoke_command
    return invoke_command(event)


@app.command("render-config")
def render_config_cmd(
    config: Path = typer.Argument(..., help="Site configuration JSON file"),
):
    """Print the environment module generated for a site configuration."""
    from .commands.render_config import render_config_command
    return render_config_command(config)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
):
    """Static site builder - build and publish site archives."""
    if version:
        console.print(f"site-builder v{get_version()}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            Panel(
                "[bold blue]Static Site Builder[/bold blue]\n\n"
                "Builds uploaded site archives and publishes them to S3.\n\n"
                "Use [bold]site-builder --help[/bold] to see available commands.",
                title="Welcome",
                expand=False,
            )
        )


if __name__ == "__main__":
    app()
