"""Configuration constants for the build-and-publish pipeline."""

# Build toolchain
DEFAULT_INSTALL_COMMAND = ("npm", "install", "--force")
DEFAULT_BUILD_COMMAND = ("npm", "run", "build")
DEFAULT_BUILD_OUTPUT_DIR = "dist"
DEFAULT_BUILD_TIMEOUT_SECONDS = 600  # 10 minutes, below the Lambda 15 minute cap

# Extraction
UNZIP_BINARY = "unzip"
UNZIP_TIMEOUT_SECONDS = 120
UNZIP_EMPTY_ARCHIVE_WARNING = "zipfile is empty"
ZIP_SYSTEM_UNIX = 3  # ZipInfo.create_system for archives made on Unix

# Generated configuration file
ENVIRONMENT_EXPORT_NAME = "environment"
ENVIRONMENT_FILE_PATHS = (
    "src/environments/environment.prod.ts",
    "src/environments/environment.ts",
)

# Publishing
CACHE_CONTROL_NO_STORE = "no-store"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
CONTENT_TYPES = {
    ".html": "text/html",
    ".js": "application/javascript",
    ".css": "text/css",
}
DEFAULT_UPLOAD_CONCURRENCY = 8

SUCCESS_MESSAGE = "Build and deploy successful"
