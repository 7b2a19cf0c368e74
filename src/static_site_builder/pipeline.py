"""
Build-and-publish pipeline controller.

Main class that coordinates one invocation of the site build process.
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional, Type

from .build.config_injector import inject_configuration
from .build.executor import BuildConfig, BuildExecutor
from .build.extractors import ArchiveExtractor, get_extractor
from .config import PipelineSettings
from .core.exceptions import (
    BuildError,
    ConfigurationError,
    ExtractionError,
    PipelineError,
    PublishError,
    TransferError,
)
from .core.process_runner import ProcessRunner
from .core.scratch import scratch_directory
from .core.storage import SourceStore, create_s3_client
from .models import BuildInvocation, PipelineResult, SiteConfiguration
from .publish.publisher import ArtifactPublisher

log = logging.getLogger(__name__)


@contextmanager
def _stage(name: str, error_type: Type[PipelineError]) -> Generator[None, None, None]:
    """Log a stage's boundaries and wrap unexpected failures in its error type."""
    log.info(f"Stage {name}: started")
    started = time.monotonic()
    try:
        yield
    except PipelineError:
        log.error(f"Stage {name}: failed")
        raise
    except Exception as e:
        log.exception(f"Stage {name}: failed with unexpected error")
        raise error_type(f"{type(e).__name__}: {e}") from e
    log.info(f"Stage {name}: completed in {time.monotonic() - started:.1f}s")


class PipelineController:
    """
    Orchestrate one build-and-publish invocation.

    This class coordinates, strictly in sequence:
    1. Archive download from the archive store
    2. Extraction into a fresh per-invocation working tree
    3. Site configuration injection
    4. Dependency install and compile
    5. Publishing the build output to the serving bucket

    A failure in any step stops the remaining steps. Nothing is retried here;
    retries belong to the invoking platform.
    """

    def __init__(
        self,
        source_store: SourceStore,
        extractor: ArchiveExtractor,
        build_executor: BuildExecutor,
        publisher: ArtifactPublisher,
        site_config: SiteConfiguration,
        destination_bucket: str,
        scratch_root: Optional[Path] = None,
    ):
        self.source_store = source_store
        self.extractor = extractor
        self.build_executor = build_executor
        self.publisher = publisher
        self.site_config = site_config
        self.destination_bucket = destination_bucket
        self.scratch_root = scratch_root

    @classmethod
    def from_settings(
        cls,
        settings: PipelineSettings,
        s3_client: Optional[Any] = None,
        runner: Optional[ProcessRunner] = None,
    ) -> "PipelineController":
        """Wire a controller from deployment settings."""
        s3_client = s3_client or create_s3_client(settings.endpoint_url)
        runner = runner or ProcessRunner()

        return cls(
            source_store=SourceStore(s3_client),
            extractor=get_extractor(settings.extractor, runner=runner),
            build_executor=BuildExecutor(
                BuildConfig(
                    install_command=settings.install_command,
                    build_command=settings.build_command,
                    output_dir=settings.build_output_dir,
                    timeout=settings.build_timeout,
                ),
                runner=runner,
            ),
            publisher=ArtifactPublisher(s3_client, concurrency=settings.upload_concurrency),
            site_config=settings.site_config,
            destination_bucket=settings.destination_bucket,
            scratch_root=settings.scratch_root,
        )

    def run(self, invocation: BuildInvocation) -> PipelineResult:
        """
        Execute the complete pipeline for one trigger.

        Args:
            invocation: The archive upload that triggered this run

        Returns:
            PipelineResult with the published keys

        Raises:
            PipelineError: Subclass naming the stage that failed, chained to the cause
        """
        log.info(
            f"Building site '{invocation.site_name}' from s3://{invocation.bucket}/{invocation.key}"
        )

        with _stage("download", TransferError):
            archive = self.source_store.download(invocation.bucket, invocation.key)

        with scratch_directory(self.scratch_root) as workdir:
            source_dir = workdir / "source"

            with _stage("extract", ExtractionError):
                self.extractor.extract(archive, source_dir)

            with _stage("configure", ConfigurationError):
                inject_configuration(self.site_config, source_dir)

            with _stage("build", BuildError):
                output_dir = self.build_executor.build(source_dir)

            with _stage("upload", PublishError):
                artifacts = self.publisher.publish(output_dir, self.destination_bucket)

        log.info(
            f"Published {len(artifacts)} files for '{invocation.site_name}' "
            f"to s3://{self.destination_bucket}"
        )
        return PipelineResult(
            site_name=invocation.site_name,
            published_keys=[artifact.key for artifact in artifacts],
        )
