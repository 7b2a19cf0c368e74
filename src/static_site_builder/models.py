"""
Data models for the build-and-publish pipeline.

Pydantic models for the trigger, the build-time site configuration, the
artifacts sent to the serving bucket and the terminal result.
"""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field

from .core.constants import CACHE_CONTROL_NO_STORE, SUCCESS_MESSAGE


class BuildInvocation(BaseModel):
    """
    One trigger of the pipeline.

    Identifies the uploaded archive and the site it belongs to. The site name
    is the first segment of the object key, which the archive store uses as
    its per-site prefix (e.g. ``AdminSite/src.zip``).
    """

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    site_name: str = ""

    @classmethod
    def from_s3_event(cls, event: Dict[str, Any]) -> "BuildInvocation":
        """
        Build an invocation from an S3 ObjectCreated notification.

        Only the first record is used. Object keys arrive URL-encoded with
        spaces as ``+``.

        Raises:
            ValueError: If the event has no S3 record
        """
        try:
            s3_record = event["Records"][0]["s3"]
            bucket = s3_record["bucket"]["name"]
            raw_key = s3_record["object"]["key"]
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"Not an S3 object event: missing {e}") from e

        return cls.for_key(bucket, unquote_plus(raw_key))

    @classmethod
    def for_key(cls, bucket: str, key: str) -> "BuildInvocation":
        site_name = key.split("/", 1)[0] if "/" in key else ""
        return cls(bucket=bucket, key=key, site_name=site_name)


class SiteConfiguration(BaseModel):
    """
    Build-time values baked into the compiled site.

    Fixed when the pipeline is deployed, identical across invocations for a
    site. Identity fields are optional for sites without authentication.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    production: bool
    client_id: Optional[str] = Field(default=None, alias="clientId")
    issuer: Optional[str] = None
    api_url: str = Field(alias="apiUrl")
    well_known_endpoint_url: Optional[str] = Field(
        default=None, alias="wellKnownEndpointUrl"
    )

    def to_environment(self) -> Dict[str, Any]:
        """Return the frontend ``environment`` mapping, omitting absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PublishedArtifact(BaseModel):
    """One output file as written to the serving bucket."""

    model_config = ConfigDict(frozen=True)

    key: str
    body: bytes = Field(repr=False)
    content_type: str
    cache_control: str = CACHE_CONTROL_NO_STORE

    @property
    def size_bytes(self) -> int:
        return len(self.body)


class PipelineResult(BaseModel):
    """Successful outcome of one invocation. Failures are raised instead."""

    status_code: int = 200
    message: str = SUCCESS_MESSAGE
    site_name: str = ""
    published_keys: List[str] = Field(default_factory=list)

    @property
    def published_count(self) -> int:
        return len(self.published_keys)

    def to_response(self) -> Dict[str, Any]:
        """Render the Lambda proxy-style response returned to the platform."""
        return {
            "statusCode": self.status_code,
            "body": json.dumps(
                {
                    "message": self.message,
                    "site": self.site_name,
                    "published": self.published_count,
                }
            ),
        }
