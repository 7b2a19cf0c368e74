"""
External process execution.

Every call-out to a toolchain (npm, unzip) goes through a ProcessRunner so the
pipeline can be exercised without the real binaries installed.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

log = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of one external command."""

    command: Sequence[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Run external commands and capture their output."""

    def invoke(
        self,
        command: Sequence[str],
        cwd: Path,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run a command to completion.

        A non-zero exit is reported in the result, not raised; callers decide
        what it means for their stage.

        Args:
            command: Program and arguments
            cwd: Working directory for the command
            timeout: Seconds before the command is killed

        Returns:
            ProcessResult with exit code and captured output

        Raises:
            FileNotFoundError: If the program is not installed
            subprocess.TimeoutExpired: If the command exceeds the timeout
        """
        log.debug(f"Running {' '.join(command)} in {cwd}")

        completed = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )

        log.debug(f"{command[0]} exited with {completed.returncode}")

        return ProcessResult(
            command=list(command),
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
