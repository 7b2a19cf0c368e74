"""Render the site configuration into the source tree before it is compiled."""

import json
import logging
from pathlib import Path
from typing import List

from ..core.constants import ENVIRONMENT_EXPORT_NAME, ENVIRONMENT_FILE_PATHS
from ..core.exceptions import ConfigurationError
from ..models import SiteConfiguration

log = logging.getLogger(__name__)


def render_environment(config: SiteConfiguration) -> str:
    """Return the generated environment module for a site configuration."""
    payload = json.dumps(config.to_environment(), separators=(",", ":"))
    return f"export const {ENVIRONMENT_EXPORT_NAME} = {payload}"


def inject_configuration(config: SiteConfiguration, tree_root: Path) -> List[Path]:
    """
    Write the environment module to the production and development slots.

    Existing files are replaced outright; the same configuration always yields
    the same bytes.

    Args:
        config: Site configuration to bake into the build
        tree_root: Root of the extracted source tree

    Returns:
        Paths written

    Raises:
        ConfigurationError: If a file cannot be written
    """
    content = render_environment(config)
    written = []

    for relative_path in ENVIRONMENT_FILE_PATHS:
        target = tree_root / relative_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            log.error(f"Could not write {target}: {e}")
            raise ConfigurationError(f"Could not write {relative_path}: {e}") from e
        written.append(target)

    log.info(f"Environment configuration written to {', '.join(ENVIRONMENT_FILE_PATHS)}")
    return written
