"""Deployment-time settings for the build function."""

import os
import shlex
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from .build.extractors import ExtractorType
from .core.constants import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_BUILD_OUTPUT_DIR,
    DEFAULT_BUILD_TIMEOUT_SECONDS,
    DEFAULT_INSTALL_COMMAND,
    DEFAULT_UPLOAD_CONCURRENCY,
)
from .core.exceptions import SettingsError
from .models import SiteConfiguration


@dataclass
class PipelineSettings:
    """Settings fixed when the build function is deployed, not re-read per event."""

    destination_bucket: str
    site_config: SiteConfiguration
    extractor: ExtractorType = ExtractorType.ZIPFILE
    scratch_root: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    build_output_dir: str = DEFAULT_BUILD_OUTPUT_DIR
    install_command: Tuple[str, ...] = DEFAULT_INSTALL_COMMAND
    build_command: Tuple[str, ...] = DEFAULT_BUILD_COMMAND
    build_timeout: int = DEFAULT_BUILD_TIMEOUT_SECONDS
    upload_concurrency: int = DEFAULT_UPLOAD_CONCURRENCY
    endpoint_url: Optional[str] = None

    @classmethod
    def from_environment(cls) -> "PipelineSettings":
        """
        Create settings from environment variables.

        Environment variables:
            BUCKET_NAME: Serving bucket for built assets (required)
            SITE_CONFIG: JSON SiteConfiguration (required)
            EXTRACTOR: ``zipfile`` or ``unzip`` (defaults to zipfile)
            SCRATCH_ROOT: Parent of per-invocation working trees (defaults to temp dir)
            BUILD_OUTPUT_DIR: Build output directory inside the tree (defaults to dist)
            INSTALL_COMMAND: Dependency install command (defaults to npm install --force)
            BUILD_COMMAND: Compile command (defaults to npm run build)
            BUILD_TIMEOUT_SECONDS: Per-command timeout (defaults to 600)
            UPLOAD_CONCURRENCY: Parallel uploads (defaults to 8)
            S3_ENDPOINT_URL: Alternate S3 endpoint, e.g. LocalStack

        Returns:
            PipelineSettings instance

        Raises:
            SettingsError: If a required variable is missing or malformed
        """
        bucket = os.getenv("BUCKET_NAME")
        raw_config = os.getenv("SITE_CONFIG")
        if not bucket or not raw_config:
            raise SettingsError()

        try:
            site_config = SiteConfiguration.model_validate_json(raw_config)
        except ValidationError as e:
            raise SettingsError(f"SITE_CONFIG is not a valid site configuration: {e}") from e

        try:
            extractor = ExtractorType(os.getenv("EXTRACTOR", ExtractorType.ZIPFILE.value))
            build_timeout = int(
                os.getenv("BUILD_TIMEOUT_SECONDS", DEFAULT_BUILD_TIMEOUT_SECONDS)
            )
            upload_concurrency = int(
                os.getenv("UPLOAD_CONCURRENCY", DEFAULT_UPLOAD_CONCURRENCY)
            )
        except ValueError as e:
            raise SettingsError(f"Invalid pipeline setting: {e}") from e

        if upload_concurrency < 1:
            raise SettingsError("UPLOAD_CONCURRENCY must be at least 1")

        scratch_root = os.getenv("SCRATCH_ROOT")

        return cls(
            destination_bucket=bucket,
            site_config=site_config,
            extractor=extractor,
            scratch_root=Path(scratch_root) if scratch_root else Path(tempfile.gettempdir()),
            build_output_dir=os.getenv("BUILD_OUTPUT_DIR", DEFAULT_BUILD_OUTPUT_DIR),
            install_command=_command_from_env("INSTALL_COMMAND", DEFAULT_INSTALL_COMMAND),
            build_command=_command_from_env("BUILD_COMMAND", DEFAULT_BUILD_COMMAND),
            build_timeout=build_timeout,
            upload_concurrency=upload_concurrency,
            endpoint_url=os.getenv("S3_ENDPOINT_URL"),
        )


def _command_from_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    return tuple(shlex.split(value))
