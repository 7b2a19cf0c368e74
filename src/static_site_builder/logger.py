import logging
import os
import sys
from typing import Optional, Union

from rich.logging import RichHandler


def is_rich_enabled() -> bool:
    """Check if Rich log output was requested via the environment."""
    return os.environ.get("SITE_BUILDER_RICH_UI", "false").lower() in (
        "true",
        "1",
        "yes",
    )


def setup_logging(
    level: Union[int, str] = logging.INFO, stream=sys.stdout, fmt: Optional[str] = None
):
    """
    Sets up the root logger with a stream handler and basic formatting.
    Uses a Rich handler when SITE_BUILDER_RICH_UI is set, otherwise plain lines
    that CloudWatch can ingest as-is.
    An existing handler (the Lambda runtime installs one) is kept, but the
    level is still applied so INFO lines reach it.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    if not root_logger.hasHandlers():
        if is_rich_enabled():
            handler = RichHandler(rich_tracebacks=True, show_path=False)
        else:
            if fmt is None:
                if level == logging.DEBUG:
                    fmt = "%(asctime)s | %(levelname)-5s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
                else:
                    fmt = "%(asctime)s | %(levelname)-5s | %(message)s"

            handler = logging.StreamHandler(stream)
            handler.setFormatter(logging.Formatter(fmt))

        root_logger.addHandler(handler)

    root_logger.setLevel(level)

    # Optionally allow log level override via env var
    env_level = os.environ.get("LOG_LEVEL")
    if env_level:
        root_logger.setLevel(env_level.upper())

    # botocore logs every request at DEBUG; keep it quiet unless asked for
    logging.getLogger("botocore").setLevel(
        os.environ.get("BOTO_LOG_LEVEL", "WARNING").upper()
    )
