"""site-builder invoke command - run the deployed pipeline against an event file."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ...core.exceptions import PipelineError, SettingsError

console = Console()


def invoke_command(event_path: Path):
    """Run the Lambda handler locally with settings from the environment."""
    from ...handler import lambda_handler

    try:
        event = json.loads(event_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Error:[/red] Could not read event file {event_path}: {escape(str(e))}")
        raise typer.Exit(1)

    try:
        response = lambda_handler(event, None)
    except (SettingsError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except PipelineError as e:
        console.print(f"[red]Pipeline failed during {e.stage}:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print_json(data=response)
