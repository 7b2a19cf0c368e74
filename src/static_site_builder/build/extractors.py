"""
Archive extraction strategies.

Both strategies take the downloaded archive bytes and a destination that must
not exist yet, and produce the same file tree:

- ZIPFILE: in-process extraction with the standard ``zipfile`` module
- UNZIP: writes the archive to disk and shells out to the ``unzip`` binary
"""

import io
import logging
import os
import shutil
import stat
import subprocess
import tempfile
import zipfile
import zlib
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

from ..core.constants import (
    UNZIP_BINARY,
    UNZIP_EMPTY_ARCHIVE_WARNING,
    UNZIP_TIMEOUT_SECONDS,
    ZIP_SYSTEM_UNIX,
)
from ..core.exceptions import ExtractionError
from ..core.process_runner import ProcessRunner

log = logging.getLogger(__name__)


class ExtractorType(str, Enum):
    """Available archive extraction strategies."""

    ZIPFILE = "zipfile"  # In-process, no external binary
    UNZIP = "unzip"  # External unzip binary via the process runner


class ArchiveExtractor(ABC):
    """Unpack an archive buffer into a new directory."""

    strategy_type: ExtractorType

    def extract(self, data: bytes, destination: Path) -> Path:
        """
        Extract archive bytes into ``destination``.

        Args:
            data: Raw archive bytes
            destination: Directory to create; must not already exist

        Returns:
            The destination path

        Raises:
            ExtractionError: If the destination exists or the archive is unusable
        """
        if destination.exists():
            raise ExtractionError(f"Extraction destination already exists: {destination}")
        if not data:
            raise ExtractionError("Archive is empty (0 bytes)")

        log.info(f"Extracting {len(data)} bytes with {self.strategy_type.value}")
        destination.mkdir(parents=True)
        try:
            self._extract(data, destination)
        except Exception:
            # leave no partial tree behind
            shutil.rmtree(destination, ignore_errors=True)
            raise
        log.info(f"Source unpacked to {destination}")
        return destination

    @abstractmethod
    def _extract(self, data: bytes, destination: Path) -> None:
        """Unpack into an existing, empty destination."""
        ...


def _is_within(path: Path, target_dir: Path) -> bool:
    return path == target_dir or str(path).startswith(str(target_dir) + os.sep)


def _check_member_paths(archive: zipfile.ZipFile, target_dir: Path) -> None:
    target_dir_resolved = target_dir.resolve()

    for name in archive.namelist():
        if not _is_within((target_dir / name).resolve(), target_dir_resolved):
            raise ExtractionError(f"Unsafe archive member path: {name}")


def _unix_mode(info: zipfile.ZipInfo) -> int:
    """Return the Unix mode stored for a member, or 0 when none was recorded."""
    if info.create_system != ZIP_SYSTEM_UNIX:
        return 0
    return info.external_attr >> 16


class ZipfileExtractor(ArchiveExtractor):
    """
    Extract in-process, restoring symlinks and permission bits like unzip does.
    """

    strategy_type = ExtractorType.ZIPFILE

    def _extract(self, data: bytes, destination: Path) -> None:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                if not archive.infolist():
                    raise ExtractionError("Archive contains no entries")
                _check_member_paths(archive, destination)
                for info in archive.infolist():
                    self._extract_member(archive, info, destination)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
            log.error(f"Archive could not be extracted: {e}")
            raise ExtractionError(f"Corrupt or unsupported archive: {e}") from e

    def _extract_member(
        self, archive: zipfile.ZipFile, info: zipfile.ZipInfo, destination: Path
    ) -> None:
        mode = _unix_mode(info)

        if stat.S_ISLNK(mode):
            link_path = destination / info.filename
            link_target = archive.read(info).decode("utf-8")
            resolved = (link_path.parent / link_target).resolve()
            if not _is_within(resolved, destination.resolve()):
                raise ExtractionError(
                    f"Unsafe symlink target in archive: {info.filename} -> {link_target}"
                )
            link_path.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(link_target, link_path)
            return

        extracted = archive.extract(info, path=destination)
        if not info.is_dir() and stat.S_IMODE(mode):
            os.chmod(extracted, stat.S_IMODE(mode))


class UnzipBinaryExtractor(ArchiveExtractor):
    strategy_type = ExtractorType.UNZIP

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        binary: str = UNZIP_BINARY,
        timeout: float = UNZIP_TIMEOUT_SECONDS,
    ):
        self.runner = runner or ProcessRunner()
        self.binary = binary
        self.timeout = timeout

    def _extract(self, data: bytes, destination: Path) -> None:
        with tempfile.TemporaryDirectory(dir=destination.parent) as tmpdir:
            archive_path = Path(tmpdir) / "source.zip"
            archive_path.write_bytes(data)

            command = [self.binary, "-q", "-o", str(archive_path), "-d", str(destination)]
            try:
                result = self.runner.invoke(command, cwd=destination.parent, timeout=self.timeout)
            except (FileNotFoundError, subprocess.TimeoutExpired) as e:
                log.error(f"{self.binary} could not run: {e}")
                raise ExtractionError(f"{self.binary} could not run: {e}") from e

        output = f"{result.stderr}\n{result.stdout}"
        if result.exit_code == 1 and UNZIP_EMPTY_ARCHIVE_WARNING in output:
            raise ExtractionError("Archive contains no entries")

        if not result.ok:
            log.error(f"{self.binary} exited with {result.exit_code}: {result.stderr}")
            raise ExtractionError(
                f"{self.binary} exited with {result.exit_code}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )


def get_extractor(
    strategy: ExtractorType, runner: Optional[ProcessRunner] = None
) -> ArchiveExtractor:
    """Return the extractor for a configured strategy."""
    if strategy == ExtractorType.ZIPFILE:
        return ZipfileExtractor()
    if strategy == ExtractorType.UNZIP:
        return UnzipBinaryExtractor(runner=runner)
    raise ValueError(f"Unsupported extractor: {strategy}")
