# Standard library imports
import asyncio
import logging
from typing import Any, Dict, List, Optional

# External package imports
from botocore.exceptions import BotoCoreError, ClientError

# Local application imports
from ...domain.exceptions import AssetNotFound, StorageError
from ...domain.gateways.object_storage import ObjectStorage

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3ObjectStorage(ObjectStorage):
    """
    S3 implementation of ObjectStorage.

    boto3 is blocking, every call runs in a worker thread.
    """

    def __init__(self, client: Any, bucket_name: str) -> None:
        if not bucket_name:
            raise ValueError("S3 bucket name is required")
        self.client = client
        self.bucket_name = bucket_name

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key} to S3: {e}")
            raise StorageError(f"Error uploading {key}: {str(e)}", details={"key": key})

    async def head(self, key: str) -> Optional[Dict[str, object]]:
        try:
            response = await asyncio.to_thread(
                self.client.head_object, Bucket=self.bucket_name, Key=key
            )
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise StorageError(f"Error reading metadata of {key}: {str(e)}", details={"key": key})
        except BotoCoreError as e:
            raise StorageError(f"Error reading metadata of {key}: {str(e)}", details={"key": key})

        return {
            "size": response.get("ContentLength", 0),
            "content_type": response.get("ContentType", ""),
            "last_modified": response.get("LastModified"),
        }

    async def get(self, key: str) -> bytes:
        try:
            response = await asyncio.to_thread(
                self.client.get_object, Bucket=self.bucket_name, Key=key
            )
            return await asyncio.to_thread(response["Body"].read)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise AssetNotFound(key)
            raise StorageError(f"Error downloading {key}: {str(e)}", details={"key": key})
        except BotoCoreError as e:
            raise StorageError(f"Error downloading {key}: {str(e)}", details={"key": key})

    async def list_keys(self, prefix: str) -> List[str]:
        return await asyncio.to_thread(self._list_keys_sync, prefix)

    def _list_keys_sync(self, prefix: str) -> List[str]:
        keys: List[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                for item in page.get("Contents", []):
                    key = item.get("Key")
                    # Skip "directory" placeholder objects
                    if key and not key.endswith("/"):
                        keys.append(key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list S3 prefix {prefix}: {e}")
            raise StorageError(f"Error listing {prefix}: {str(e)}", details={"prefix": prefix})
        return keys
