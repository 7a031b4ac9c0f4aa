# Standard library imports
import asyncio
import logging
from typing import Any, Dict, List

# External package imports
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
)

# Local application imports
from ...domain.exceptions import (
    CollectionNotFound,
    EventFaceError,
    IndexFailure,
    IndexServiceUnavailable,
    RateLimited,
)
from ...domain.gateways.face_index import FaceIndexService
from ...domain.models.match import RawHit

logger = logging.getLogger(__name__)

_THROTTLING_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "LimitExceededException",
}
_UNAVAILABLE_CODES = {
    "AccessDeniedException",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "ExpiredTokenException",
    "InternalServerError",
    "ServiceUnavailableException",
}
_UNAVAILABLE_BOTO_ERRORS = (
    EndpointConnectionError,
    ConnectTimeoutError,
    NoCredentialsError,
    PartialCredentialsError,
)

# Index every face found in an event photo, not only the largest one
_INDEX_MAX_FACES = 100


def translate_error(error: BaseException, collection_name: str) -> EventFaceError:
    """Map a botocore error to the domain exception taxonomy."""
    if isinstance(error, ClientError):
        code = str(error.response.get("Error", {}).get("Code", ""))
        message = str(error.response.get("Error", {}).get("Message", "")) or str(error)
        if code == "ResourceNotFoundException":
            return CollectionNotFound(collection_name)
        if code in _THROTTLING_CODES or "Provisioned rate exceeded" in message:
            return RateLimited(f"{code}: {message}", details={"collection": collection_name})
        if code in _UNAVAILABLE_CODES:
            return IndexServiceUnavailable(f"{code}: {message}", details={"collection": collection_name})
        if code == "InvalidParameterException":
            return IndexFailure(
                f"{code}: {message}",
                user_message="No face could be detected in the image.",
                details={"collection": collection_name},
            )
        return IndexFailure(f"{code}: {message}", details={"collection": collection_name})

    if isinstance(error, _UNAVAILABLE_BOTO_ERRORS):
        return IndexServiceUnavailable(str(error), details={"collection": collection_name})
    return IndexFailure(str(error), details={"collection": collection_name})


class RekognitionFaceIndex(FaceIndexService):
    """
    AWS Rekognition implementation of FaceIndexService.

    Images are passed by S3 reference, so the assets must live in `bucket_name`.
    """

    def __init__(self, client: Any, bucket_name: str) -> None:
        self.client = client
        self.bucket_name = bucket_name

    def _image(self, asset_key: str) -> Dict[str, Any]:
        return {"S3Object": {"Bucket": self.bucket_name, "Name": asset_key}}

    async def _call(self, collection_name: str, method: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(getattr(self.client, method), **kwargs)
        except (ClientError, BotoCoreError) as e:
            raise translate_error(e, collection_name) from e

    async def create_collection(self, collection_name: str) -> bool:
        try:
            await asyncio.to_thread(self.client.create_collection, CollectionId=collection_name)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ResourceAlreadyExistsException":
                logger.debug(f"Collection {collection_name} already exists")
                return False
            raise translate_error(e, collection_name) from e
        except BotoCoreError as e:
            raise translate_error(e, collection_name) from e
        logger.info(f"Created collection {collection_name}")
        return True

    async def index_faces(self, collection_name: str, asset_key: str, external_id: str) -> List[str]:
        response = await self._call(
            collection_name,
            "index_faces",
            CollectionId=collection_name,
            Image=self._image(asset_key),
            ExternalImageId=external_id,
            MaxFaces=_INDEX_MAX_FACES,
            QualityFilter="NONE",
            DetectionAttributes=["DEFAULT"],
        )
        face_ids = [
            record["Face"]["FaceId"]
            for record in response.get("FaceRecords", [])
            if record.get("Face", {}).get("FaceId")
        ]
        unindexed = response.get("UnindexedFaces") or []
        if unindexed:
            logger.debug(f"{len(unindexed)} face(s) in {asset_key} were detected but not indexed")
        return face_ids

    async def search_faces_by_image(
        self,
        collection_name: str,
        asset_key: str,
        max_faces: int,
        threshold: float,
    ) -> List[RawHit]:
        response = await self._call(
            collection_name,
            "search_faces_by_image",
            CollectionId=collection_name,
            Image=self._image(asset_key),
            MaxFaces=max_faces,
            FaceMatchThreshold=threshold,
        )
        hits = []
        for face_match in response.get("FaceMatches", []):
            face = face_match.get("Face", {})
            external_id = face.get("ExternalImageId")
            if not external_id:
                continue
            hits.append(RawHit(
                external_id=external_id,
                similarity=float(face_match.get("Similarity", 0.0)),
                face_id=face.get("FaceId"),
            ))
        return hits

    async def delete_faces(self, collection_name: str, face_ids: List[str]) -> None:
        await self._call(
            collection_name,
            "delete_faces",
            CollectionId=collection_name,
            FaceIds=list(face_ids),
        )
