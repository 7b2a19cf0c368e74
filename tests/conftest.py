"""
Test configuration and fixtures for static-site-builder tests.

Provides shared fixtures for:
- Zip archive construction
- Site configurations
- Mock S3 clients and events
- Fake process runners standing in for npm and unzip
- Environment variable management
"""

import io
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
from unittest.mock import MagicMock

import pytest

from static_site_builder.core.process_runner import ProcessResult, ProcessRunner
from static_site_builder.handler import reset_controller
from static_site_builder.models import SiteConfiguration


def build_zip(files: Dict[str, bytes]) -> bytes:
    """Build a zip archive in memory. Names ending in ``/`` become directories."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


class FakeProcessRunner(ProcessRunner):
    """Process runner that simulates the site toolchain without running it.

    Every command is recorded. ``fail_on`` names the program argument that
    triggers a failure (``"install"`` or ``"build"``). When the
    build command succeeds, ``outputs`` is written below ``<cwd>/<output_dir>``.
    """

    def __init__(
        self,
        outputs: Optional[Dict[str, bytes]] = None,
        output_dir: str = "dist",
        fail_on: Optional[str] = None,
        exit_code: int = 1,
        stderr: str = "",
        stdout: str = "",
    ):
        self.outputs = outputs
        self.output_dir = output_dir
        self.fail_on = fail_on
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
        self.calls: List[List[str]] = []
        self.environment_seen: Optional[str] = None

    def invoke(self, command: Sequence[str], cwd: Path, timeout=None) -> ProcessResult:
        command = list(command)
        self.calls.append(command)

        if self.fail_on is not None and self.fail_on in command:
            return ProcessResult(
                command=command,
                exit_code=self.exit_code,
                stdout=self.stdout,
                stderr=self.stderr,
            )

        if "build" in command:
            env_file = Path(cwd) / "src" / "environments" / "environment.prod.ts"
            if env_file.exists():
                self.environment_seen = env_file.read_text()
            if self.outputs is not None:
                for name, data in self.outputs.items():
                    target = Path(cwd) / self.output_dir / name
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_bytes(data)

        return ProcessResult(command=command, exit_code=0, stdout="ok\n")


@pytest.fixture
def make_zip() -> Callable[[Dict[str, bytes]], bytes]:
    """Provide the in-memory zip builder."""
    return build_zip


@pytest.fixture
def site_archive() -> bytes:
    """Provide a minimal buildable site archive.

    Returns:
        Zip bytes with a package manifest, sources and an empty directory.
    """
    return build_zip(
        {
            "package.json": b'{"name": "admin-web", "scripts": {"build": "ng build"}}\n',
            "angular.json": b"{}\n",
            "src/main.ts": b"import './app/app.module';\n",
            "src/app/app.component.html": b"<h1>Admin</h1>\n",
            "src/assets/logo.png": bytes(range(256)),
            "src/environments/": b"",
        }
    )


@pytest.fixture
def site_config() -> SiteConfiguration:
    """Provide a site configuration with only the required fields."""
    return SiteConfiguration(production=True, api_url="https://api.example.com")


@pytest.fixture
def full_site_config() -> SiteConfiguration:
    """Provide a site configuration with identity provider settings."""
    return SiteConfiguration(
        production=False,
        client_id="client-123",
        issuer="https://auth.example.com/oauth2/token",
        api_url="https://api.example.com/prod/",
        well_known_endpoint_url="https://auth.example.com/.well-known/openid-configuration",
    )


@pytest.fixture
def fake_runner() -> Callable[..., FakeProcessRunner]:
    """Provide a factory for fake toolchain runners."""
    return FakeProcessRunner


@pytest.fixture
def built_site() -> Dict[str, bytes]:
    """Provide the files the fake toolchain writes for the minimal site."""
    return {
        "index.html": b"<!doctype html><app-root></app-root>\n",
        "main.js": b"console.log('admin');\n",
        "styles.css": b"body { margin: 0; }\n",
    }


@pytest.fixture
def mock_s3_client() -> MagicMock:
    """Provide a mock boto3 S3 client.

    ``get_object`` returns an empty body until a test calls
    ``serve_archive``.
    """
    client = MagicMock()
    client.get_object.return_value = {"Body": io.BytesIO(b"")}
    client.put_object.return_value = {"ETag": '"etag"'}
    return client


@pytest.fixture
def serve_archive(mock_s3_client: MagicMock) -> Callable[[bytes], None]:
    """Make the mock S3 client return the given archive bytes."""

    def _serve(data: bytes) -> None:
        mock_s3_client.get_object.return_value = {"Body": io.BytesIO(data)}

    return _serve


@pytest.fixture
def s3_event() -> Callable[..., dict]:
    """Provide a factory for S3 ObjectCreated notification events."""

    def _event(key: str = "AdminSite/src.zip", bucket: str = "source-code-bucket") -> dict:
        return {
            "Records": [
                {
                    "eventSource": "aws:s3",
                    "eventName": "ObjectCreated:Put",
                    "s3": {
                        "bucket": {"name": bucket},
                        "object": {"key": key, "size": 1024},
                    },
                }
            ]
        }

    return _event


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    """Provide patched environment variables for the deployed function.

    Returns:
        Dictionary of environment variables set.
    """
    env_vars = {
        "BUCKET_NAME": "serving-bucket",
        "SITE_CONFIG": '{"production": true, "apiUrl": "https://api.example.com"}',
        "LOG_LEVEL": "ERROR",  # Suppress logs during tests
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


@pytest.fixture(autouse=True)
def reset_cached_controller():
    """Drop the handler's cached controller between tests."""
    reset_controller()
    yield
    reset_controller()
