"""
Publish build output to the serving bucket.

Uploads every top-level file of the build output directory with its content
type and a no-store cache directive. The site is re-published wholesale on
every build, so nothing is cached at the edge.
"""

import asyncio
import logging
from pathlib import Path, PurePath
from typing import Any, List, Optional, Union

from ..core.constants import (
    CACHE_CONTROL_NO_STORE,
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_UPLOAD_CONCURRENCY,
)
from ..core.exceptions import PublishError
from ..models import PublishedArtifact

log = logging.getLogger(__name__)


def content_type_for(filename: Union[str, PurePath]) -> str:
    """Infer the content type from a file name's extension."""
    suffix = PurePath(filename).suffix.lower()
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def collect_artifacts(output_dir: Path) -> List[PublishedArtifact]:
    """
    Read the publishable files at the top level of the build output.

    Subdirectories are skipped, not descended into; the site toolchain must
    emit a flat output directory.
    """
    artifacts = []
    for entry in sorted(output_dir.iterdir()):
        if entry.is_dir():
            log.debug(f"Skipping directory {entry.name}")
            continue

        artifacts.append(
            PublishedArtifact(
                key=entry.name,
                body=entry.read_bytes(),
                content_type=content_type_for(entry.name),
                cache_control=CACHE_CONTROL_NO_STORE,
            )
        )
    return artifacts


class ArtifactPublisher:
    """Upload build artifacts to an S3 bucket concurrently."""

    def __init__(self, s3_client: Any, concurrency: int = DEFAULT_UPLOAD_CONCURRENCY):
        self.s3_client = s3_client
        self.concurrency = concurrency

    def publish(self, output_dir: Path, bucket: str) -> List[PublishedArtifact]:
        """Publish ``output_dir`` to ``bucket`` and wait for every upload."""
        return asyncio.run(self.publish_async(output_dir, bucket))

    async def publish_async(
        self, output_dir: Path, bucket: str
    ) -> List[PublishedArtifact]:
        """
        Upload all top-level files of ``output_dir``.

        Every upload is awaited before returning, even when one has already
        failed. Uploads that succeeded are left in place.

        Args:
            output_dir: Build output directory
            bucket: Serving bucket name

        Returns:
            Artifacts that were uploaded

        Raises:
            PublishError: If any upload failed
        """
        artifacts = collect_artifacts(output_dir)
        log.info(f"Uploading {len(artifacts)} files to s3://{bucket}")

        semaphore = asyncio.Semaphore(self.concurrency)

        async def upload(artifact: PublishedArtifact) -> None:
            async with semaphore:
                await asyncio.to_thread(self._put, bucket, artifact)

        results = await asyncio.gather(
            *(upload(artifact) for artifact in artifacts), return_exceptions=True
        )

        failed_keys = []
        first_error: Optional[BaseException] = None
        for artifact, result in zip(artifacts, results):
            if isinstance(result, BaseException):
                log.error(f"Upload of {artifact.key} failed: {result}")
                failed_keys.append(artifact.key)
                first_error = first_error or result

        if failed_keys:
            raise PublishError(
                f"{len(failed_keys)} of {len(artifacts)} uploads failed: "
                f"{', '.join(failed_keys)}",
                failed_keys=failed_keys,
            ) from first_error

        log.info("All built files uploaded")
        return artifacts

    def _put(self, bucket: str, artifact: PublishedArtifact) -> None:
        self.s3_client.put_object(
            Bucket=bucket,
            Key=artifact.key,
            Body=artifact.body,
            ContentType=artifact.content_type,
            CacheControl=artifact.cache_control,
        )
        log.info(f"Uploaded {artifact.key} ({artifact.content_type})")
