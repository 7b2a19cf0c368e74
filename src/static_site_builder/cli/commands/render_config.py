"""site-builder render-config command."""

from pathlib import Path

from rich.console import Console

from ...build.config_injector import render_environment
from .build import load_site_config

console = Console()


def render_config_command(config_path: Path):
    """Print the generated environment module for a configuration file."""
    site_config = load_site_config(config_path)
    console.print(render_environment(site_config), markup=False, highlight=False, soft_wrap=True)
