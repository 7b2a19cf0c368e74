"""
Build toolchain execution.

Installs the site's build-time dependencies and compiles it, both as external
commands whose exit status is authoritative.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..core.constants import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_BUILD_OUTPUT_DIR,
    DEFAULT_BUILD_TIMEOUT_SECONDS,
    DEFAULT_INSTALL_COMMAND,
)
from ..core.exceptions import BuildError
from ..core.process_runner import ProcessResult, ProcessRunner

log = logging.getLogger(__name__)


@dataclass
class BuildConfig:
    """Commands and layout of the site toolchain."""

    install_command: Tuple[str, ...] = DEFAULT_INSTALL_COMMAND
    build_command: Tuple[str, ...] = DEFAULT_BUILD_COMMAND
    output_dir: str = DEFAULT_BUILD_OUTPUT_DIR
    timeout: float = DEFAULT_BUILD_TIMEOUT_SECONDS


class BuildExecutor:
    """Run dependency install and compile against a configured source tree."""

    def __init__(
        self,
        config: Optional[BuildConfig] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.config = config or BuildConfig()
        self.runner = runner or ProcessRunner()

    def build(self, tree_root: Path) -> Path:
        """
        Install dependencies and compile the site.

        Args:
            tree_root: Source tree with the environment configuration injected

        Returns:
            Path to the build output directory

        Raises:
            BuildError: If a command fails or the output directory is missing
        """
        self._run_step("install", self.config.install_command, tree_root)
        self._run_step("build", self.config.build_command, tree_root)

        output_dir = tree_root / self.config.output_dir
        if not output_dir.is_dir():
            log.error(f"Build reported success but {output_dir} does not exist")
            raise BuildError(
                f"Build output directory '{self.config.output_dir}' was not produced",
                command=self.config.build_command,
                exit_code=0,
            )

        return output_dir

    def _run_step(self, name: str, command: Sequence[str], cwd: Path) -> ProcessResult:
        command_text = " ".join(command)
        log.info(f"Running {command_text}...")

        try:
            result = self.runner.invoke(command, cwd=cwd, timeout=self.config.timeout)
        except subprocess.TimeoutExpired as e:
            log.error(f"{command_text} timed out after {self.config.timeout}s")
            raise BuildError(
                f"{name} step timed out after {self.config.timeout} seconds: {command_text}",
                command=command,
            ) from e
        except FileNotFoundError as e:
            log.error(f"{command[0]} is not installed: {e}")
            raise BuildError(
                f"{name} step could not start: {command[0]} not found", command=command
            ) from e

        if result.stdout.strip():
            log.info(f"{command_text} output:\n{result.stdout.rstrip()}")

        if not result.ok:
            log.error(f"{command_text} failed with exit code {result.exit_code}:")
            log.error(result.stderr)
            raise BuildError(
                f"{name} step failed with exit code {result.exit_code}: {command_text}",
                command=command,
                exit_code=result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        log.info(f"{command_text} completed.")
        return result
