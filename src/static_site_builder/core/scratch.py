"""Per-invocation scratch space.

A warm Lambda instance keeps ``/tmp`` between invocations, so a fixed scratch
path would collide with whatever the previous invocation left behind. Each
invocation gets its own directory, removed on every exit path.
"""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

log = logging.getLogger(__name__)


@contextmanager
def scratch_directory(
    root: Optional[Path] = None, prefix: str = "site-build-"
) -> Generator[Path, None, None]:
    """Allocate a fresh, uniquely named directory and remove it on exit."""
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)

    path = Path(tempfile.mkdtemp(prefix=prefix, dir=root))
    log.debug(f"Allocated scratch directory {path}")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        log.debug(f"Removed scratch directory {path}")
