"""Source tree preparation: extraction, configuration injection and compile."""

from .config_injector import inject_configuration, render_environment
from .executor import BuildConfig, BuildExecutor
from .extractors import (
    ArchiveExtractor,
    ExtractorType,
    UnzipBinaryExtractor,
    ZipfileExtractor,
    get_extractor,
)

__all__ = [
    "ArchiveExtractor",
    "BuildConfig",
    "BuildExecutor",
    "ExtractorType",
    "UnzipBinaryExtractor",
    "ZipfileExtractor",
    "get_extractor",
    "inject_configuration",
    "render_environment",
]
