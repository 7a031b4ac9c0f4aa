"""
Unit tests for the Rekognition and S3 adapters (boto3 client mocked)
"""
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
from eventface.domain.exceptions import (
    AssetNotFound,
    CollectionNotFound,
    IndexFailure,
    IndexServiceUnavailable,
    RateLimited,
    StorageError,
)
from eventface.domain.models.match import RawHit
from eventface.infrastructure.external.rekognition_face_index import RekognitionFaceIndex, translate_error
from eventface.infrastructure.storage.s3_object_storage import S3ObjectStorage


def _client_error(code: str, message: str = "boom", operation: str = "IndexFaces") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class TestTranslateError:
    """Tests for translate_error"""

    def test_missing_collection(self):
        error = translate_error(_client_error("ResourceNotFoundException"), "event-party")
        assert isinstance(error, CollectionNotFound)

    @pytest.mark.parametrize("code", ["ProvisionedThroughputExceededException", "ThrottlingException"])
    def test_throttling(self, code):
        assert isinstance(translate_error(_client_error(code), "event-party"), RateLimited)

    def test_rate_message(self):
        error = translate_error(_client_error("SomethingElse", "Provisioned rate exceeded"), "event-party")
        assert isinstance(error, RateLimited)

    @pytest.mark.parametrize("code", ["AccessDeniedException", "UnrecognizedClientException"])
    def test_credentials(self, code):
        assert isinstance(translate_error(_client_error(code), "event-party"), IndexServiceUnavailable)

    def test_connection_errors(self):
        assert isinstance(
            translate_error(EndpointConnectionError(endpoint_url="https://rekognition"), "event-party"),
            IndexServiceUnavailable,
        )
        assert isinstance(translate_error(NoCredentialsError(), "event-party"), IndexServiceUnavailable)

    def test_no_face(self):
        error = translate_error(_client_error("InvalidParameterException", "no faces"), "event-party")
        assert isinstance(error, IndexFailure)
        assert "No face" in error.user_message

    def test_other(self):
        assert isinstance(translate_error(_client_error("InvalidS3ObjectException"), "event-party"), IndexFailure)


class TestRekognitionFaceIndex:
    """Tests for RekognitionFaceIndex"""

    @pytest.mark.asyncio
    async def test_create_collection(self):
        client = MagicMock()
        assert await RekognitionFaceIndex(client, "bucket").create_collection("event-party") is True
        client.create_collection.assert_called_once_with(CollectionId="event-party")

    @pytest.mark.asyncio
    async def test_create_existing_collection(self):
        client = MagicMock()
        client.create_collection.side_effect = _client_error("ResourceAlreadyExistsException")
        assert await RekognitionFaceIndex(client, "bucket").create_collection("event-party") is False

    @pytest.mark.asyncio
    async def test_index_faces(self):
        client = MagicMock()
        client.index_faces.return_value = {
            "FaceRecords": [{"Face": {"FaceId": "f1"}}, {"Face": {"FaceId": "f2"}}],
            "UnindexedFaces": [],
        }
        face_ids = await RekognitionFaceIndex(client, "bucket").index_faces("event-party", "a/b.jpg", "b.jpg")
        assert face_ids == ["f1", "f2"]
        kwargs = client.index_faces.call_args.kwargs
        assert kwargs["Image"] == {"S3Object": {"Bucket": "bucket", "Name": "a/b.jpg"}}
        assert kwargs["ExternalImageId"] == "b.jpg"

    @pytest.mark.asyncio
    async def test_index_faces_throttled(self):
        client = MagicMock()
        client.index_faces.side_effect = _client_error("ThrottlingException")
        with pytest.raises(RateLimited):
            await RekognitionFaceIndex(client, "bucket").index_faces("event-party", "a/b.jpg", "b.jpg")

    @pytest.mark.asyncio
    async def test_search(self):
        client = MagicMock()
        client.search_faces_by_image.return_value = {
            "FaceMatches": [
                {"Similarity": 91.5, "Face": {"FaceId": "f1", "ExternalImageId": "a.jpg"}},
                {"Similarity": 80.0, "Face": {"FaceId": "f2"}},
            ]
        }
        hits = await RekognitionFaceIndex(client, "bucket").search_faces_by_image("event-party", "s.jpg", 50, 70.0)
        assert hits == [RawHit(external_id="a.jpg", similarity=91.5, face_id="f1")]
        assert client.search_faces_by_image.call_args.kwargs["FaceMatchThreshold"] == 70.0

    @pytest.mark.asyncio
    async def test_search_missing_collection(self):
        client = MagicMock()
        client.search_faces_by_image.side_effect = _client_error("ResourceNotFoundException")
        with pytest.raises(CollectionNotFound):
            await RekognitionFaceIndex(client, "bucket").search_faces_by_image("event-party", "s.jpg", 50, 70.0)


class TestS3ObjectStorage:
    """Tests for S3ObjectStorage"""

    def test_requires_bucket(self):
        with pytest.raises(ValueError):
            S3ObjectStorage(MagicMock(), "")

    @pytest.mark.asyncio
    async def test_head_missing(self):
        client = MagicMock()
        client.head_object.side_effect = _client_error("404", operation="HeadObject")
        assert await S3ObjectStorage(client, "bucket").head("a.jpg") is None

    @pytest.mark.asyncio
    async def test_exists(self):
        client = MagicMock()
        client.head_object.return_value = {"ContentLength": 3, "ContentType": "image/jpeg"}
        assert await S3ObjectStorage(client, "bucket").exists("a.jpg") is True

    @pytest.mark.asyncio
    async def test_head_denied(self):
        client = MagicMock()
        client.head_object.side_effect = _client_error("403", operation="HeadObject")
        with pytest.raises(StorageError):
            await S3ObjectStorage(client, "bucket").head("a.jpg")

    @pytest.mark.asyncio
    async def test_get_missing(self):
        client = MagicMock()
        client.get_object.side_effect = _client_error("NoSuchKey", operation="GetObject")
        with pytest.raises(AssetNotFound):
            await S3ObjectStorage(client, "bucket").get("a.jpg")

    @pytest.mark.asyncio
    async def test_put_failure(self):
        client = MagicMock()
        client.put_object.side_effect = _client_error("AccessDenied", operation="PutObject")
        with pytest.raises(StorageError):
            await S3ObjectStorage(client, "bucket").put("a.jpg", b"x", "image/jpeg")

    @pytest.mark.asyncio
    async def test_list_keys_paginates(self):
        client = MagicMock()
        client.get_paginator.return_value.paginate.return_value = [
            {"Contents": [{"Key": "p/a.jpg"}, {"Key": "p/dir/"}]},
            {"Contents": [{"Key": "p/b.jpg"}]},
            {},
        ]
        keys = await S3ObjectStorage(client, "bucket").list_keys("p/")
        assert keys == ["p/a.jpg", "p/b.jpg"]
        client.get_paginator.assert_called_once_with("list_objects_v2")
