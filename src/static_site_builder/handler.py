"""AWS Lambda entry point for the site build function.

Configure the function with ``static_site_builder.handler.lambda_handler`` as
its handler and an S3 ObjectCreated notification on the archive bucket,
filtered to the site's key prefix.
"""

import json
import logging
from typing import Any, Dict, Optional

from .config import PipelineSettings
from .models import BuildInvocation
from .pipeline import PipelineController

logger = logging.getLogger(__name__)

# Built on first use and reused while the Lambda instance stays warm.
_controller: Optional[PipelineController] = None


def get_controller() -> PipelineController:
    global _controller
    if _controller is None:
        _controller = PipelineController.from_settings(PipelineSettings.from_environment())
    return _controller


def reset_controller() -> None:
    """Drop the cached controller so the next call re-reads settings."""
    global _controller
    _controller = None


def lambda_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Handle an S3 upload event by building and publishing the uploaded site.

    Returns:
        ``{"statusCode": 200, "body": ...}`` on success

    Raises:
        PipelineError: On any stage failure, for the platform's retry and alerting
    """
    logger.info(f"Triggered by S3 event: {json.dumps(event)}")

    try:
        invocation = BuildInvocation.from_s3_event(event)
        logger.info(f"Source bucket: {invocation.bucket}, key: {invocation.key}")
        result = get_controller().run(invocation)
    except Exception as e:
        logger.error(f"Error during build or deploy process: {e}")
        raise

    return result.to_response()
