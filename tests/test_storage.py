# tests/test_storage.py

import boto3
import pytest
from botocore.stub import Stubber

from taskhub.errors import ObjectStorageError
from taskhub.services import ObjectStorage, key_from_url

from .fakes import FakeS3Client


@pytest.fixture()
def real_s3():
    return boto3.client(
        "s3",
        region_name="ap-south-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def test_upload_target_is_presigned_put_for_fresh_key(
    storage: ObjectStorage, s3: FakeS3Client
) -> None:
    first = storage.generate_upload_target("image/png")
    second = storage.generate_upload_target("image/png")

    assert first.file_key != second.file_key
    assert "/" not in first.file_key
    method, params, expires = s3.presigned[0]
    assert method == "put_object"
    assert params == {
        "Bucket": "task-attachments",
        "Key": first.file_key,
        "ContentType": "image/png",
    }
    assert expires == 3600
    assert first.file_key in first.upload_url


def test_download_target_is_presigned_get(storage: ObjectStorage, s3: FakeS3Client) -> None:
    url = storage.generate_download_target("abc-1")

    assert s3.presigned == [
        ("get_object", {"Bucket": "task-attachments", "Key": "abc-1"}, 3600)
    ]
    assert "abc-1" in url


def test_presign_failure_raises(storage: ObjectStorage, s3: FakeS3Client) -> None:
    s3.fail_presign = True
    with pytest.raises(ObjectStorageError):
        storage.generate_upload_target("image/png")
    with pytest.raises(ObjectStorageError):
        storage.generate_download_target("abc")


def test_public_url_is_deterministic(storage: ObjectStorage, s3: FakeS3Client) -> None:
    url = storage.public_url("abc-123")

    assert url == "https://task-attachments.s3.ap-south-1.amazonaws.com/abc-123"
    assert storage.public_url("abc-123") == url
    assert s3.presigned == [] and s3.deleted == []


@pytest.mark.parametrize(
    "value, expected",
    [
        ("abc-123", "abc-123"),
        ("https://b.s3.ap-south-1.amazonaws.com/abc-123", "abc-123"),
        ("https://b.s3.ap-south-1.amazonaws.com/abc-123?x=1#frag", "abc-123"),
        ("folder/abc-123", "abc-123"),
    ],
)
def test_key_from_url(value: str, expected: str) -> None:
    assert key_from_url(value) == expected


def test_public_url_maps_back_to_key(storage: ObjectStorage) -> None:
    key = storage.generate_upload_target("text/plain").file_key
    assert key_from_url(storage.public_url(key)) == key


def test_delete_accepts_key_or_url(storage: ObjectStorage, s3: FakeS3Client) -> None:
    storage.delete("abc-1")
    storage.delete("https://task-attachments.s3.ap-south-1.amazonaws.com/abc-2")

    assert s3.deleted == [("task-attachments", "abc-1"), ("task-attachments", "abc-2")]


def test_delete_failure_raises(storage: ObjectStorage, s3: FakeS3Client) -> None:
    s3.fail_delete = True
    with pytest.raises(ObjectStorageError) as exc:
        storage.delete("abc-1")
    assert exc.value.status_code == 500


def test_delete_without_key_raises(storage: ObjectStorage, s3: FakeS3Client) -> None:
    with pytest.raises(ObjectStorageError):
        storage.delete("https://task-attachments.s3.ap-south-1.amazonaws.com/")
    assert s3.deleted == []


def test_presigned_urls_with_boto3(real_s3) -> None:
    storage = ObjectStorage(real_s3, bucket="task-attachments", region="ap-south-1")

    target = storage.generate_upload_target("application/pdf")
    download = storage.generate_download_target(target.file_key)

    assert target.file_key in target.upload_url
    assert "task-attachments" in target.upload_url
    assert target.file_key in download


def test_delete_with_boto3(real_s3) -> None:
    storage = ObjectStorage(real_s3, bucket="task-attachments", region="ap-south-1")
    with Stubber(real_s3) as stubber:
        stubber.add_response(
            "delete_object", {}, {"Bucket": "task-attachments", "Key": "abc-1"}
        )
        storage.delete("https://task-attachments.s3.ap-south-1.amazonaws.com/abc-1")
        stubber.assert_no_pending_responses()


def test_delete_error_with_boto3(real_s3) -> None:
    storage = ObjectStorage(real_s3, bucket="task-attachments", region="ap-south-1")
    with Stubber(real_s3) as stubber:
        stubber.add_client_error(
            "delete_object", service_error_code="AccessDenied", http_status_code=403
        )
        with pytest.raises(ObjectStorageError):
            storage.delete("abc-1")
