"""boto3 client factory: one S3 and one Rekognition client per process."""
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config

from ..core.config import get_settings

logger = logging.getLogger(__name__)

# Global shared client instances
_s3_client: Optional[Any] = None
_rekognition_client: Optional[Any] = None

# Throttling is retried by the batch indexer, not inside botocore
_CLIENT_CONFIG = Config(
    retries={"max_attempts": 1, "mode": "standard"},
    max_pool_connections=50,
)


def _client_kwargs() -> Dict[str, Any]:
    settings = get_settings()
    kwargs: Dict[str, Any] = {"region_name": settings.aws_region, "config": _CLIENT_CONFIG}
    # Fall back to the default credential chain (instance role, profile) when unset
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    return kwargs


def get_s3_client() -> Any:
    """
    Get or create the shared S3 client.

    boto3 clients are thread-safe, so the same client is used from every
    worker thread started by asyncio.to_thread.
    """
    global _s3_client

    if _s3_client is None:
        _s3_client = boto3.client("s3", **_client_kwargs())
        logger.info("Created shared S3 client")

    return _s3_client


def get_rekognition_client() -> Any:
    """Get or create the shared Rekognition client."""
    global _rekognition_client

    if _rekognition_client is None:
        _rekognition_client = boto3.client("rekognition", **_client_kwargs())
        logger.info("Created shared Rekognition client")

    return _rekognition_client


def close_aws_clients() -> None:
    """Release the shared clients (call on application shutdown)."""
    global _s3_client, _rekognition_client

    for client in (_s3_client, _rekognition_client):
        if client is not None:
            client.close()
    _s3_client = None
    _rekognition_client = None
    logger.info("Closed shared AWS clients")
