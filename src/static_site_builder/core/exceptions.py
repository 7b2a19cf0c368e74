"""Custom exceptions for static_site_builder.

Every pipeline failure is raised as a ``PipelineError`` subclass naming the
stage it happened in. The original cause is kept as ``__cause__`` so the
Lambda platform reports the underlying diagnostic unchanged.
"""

from typing import List, Optional, Sequence


class PipelineError(Exception):
    """Base exception for failures in a build-and-publish invocation."""

    stage = "pipeline"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class TransferError(PipelineError):
    """Raised when the trigger object cannot be read from the archive store."""

    stage = "download"


class ExtractionError(PipelineError):
    """Raised when the archive is malformed or the destination already exists."""

    stage = "extract"


class ConfigurationError(PipelineError):
    """Raised when the site configuration cannot be rendered into the tree."""

    stage = "configure"


class BuildError(PipelineError):
    """Raised when dependency install or compile fails, or produces no output.

    The toolchain's own output is attached verbatim so operators can diagnose
    the failure from the invocation error alone.
    """

    stage = "build"

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(command) if command else []
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        if self.stderr:
            text = f"{text}\n{self.stderr}"
        return text


class PublishError(PipelineError):
    """Raised when one or more artifact uploads fail.

    Uploads that already succeeded are not rolled back; the serving bucket is
    in an indeterminate state until the pipeline is re-run.
    """

    stage = "publish"

    def __init__(self, message: str, failed_keys: Optional[List[str]] = None):
        super().__init__(message)
        self.failed_keys = failed_keys or []


class SettingsError(Exception):
    """Raised when required deployment settings are missing or invalid.

    Provides guidance on which environment variables the function expects.
    """

    def __init__(self, message: Optional[str] = None):
        if message is None:
            message = self._default_message()
        super().__init__(message)

    @staticmethod
    def _default_message() -> str:
        return """Pipeline settings are incomplete.

The build function reads its deployment-time settings from the environment:

  BUCKET_NAME   serving bucket that receives the built assets (required)
  SITE_CONFIG   JSON site configuration, e.g.
                {"production": true, "apiUrl": "https://api.example.com"} (required)
  EXTRACTOR     archive extraction strategy: zipfile or unzip (default: zipfile)

Set them on the function, or in a .env file when running locally."""
