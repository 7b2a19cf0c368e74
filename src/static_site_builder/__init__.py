# Load .env vars from file before everything else
from dotenv import load_dotenv

load_dotenv()

from .logger import setup_logging  # noqa: E402

setup_logging()

# TYPE_CHECKING imports provide full IDE support (autocomplete, type hints)
# while __getattr__ keeps boto3 out of the import path until it is needed
from typing import TYPE_CHECKING  # noqa: E402

if TYPE_CHECKING:
    from .config import PipelineSettings
    from .handler import lambda_handler
    from .models import (
        BuildInvocation,
        PipelineResult,
        PublishedArtifact,
        SiteConfiguration,
    )
    from .pipeline import PipelineController


def __getattr__(name):
    """Lazily import core modules only when accessed."""
    if name == "lambda_handler":
        from .handler import lambda_handler

        return lambda_handler
    elif name == "PipelineController":
        from .pipeline import PipelineController

        return PipelineController
    elif name == "PipelineSettings":
        from .config import PipelineSettings

        return PipelineSettings
    elif name in (
        "BuildInvocation",
        "PipelineResult",
        "PublishedArtifact",
        "SiteConfiguration",
    ):
        from . import models

        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BuildInvocation",
    "PipelineController",
    "PipelineResult",
    "PipelineSettings",
    "PublishedArtifact",
    "SiteConfiguration",
    "lambda_handler",
]
