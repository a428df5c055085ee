import io

import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError, NoCredentialsError

from mindspend.utils.storage import FileStorage, MemoryStorage, S3Storage, avatar_key, receipt_key


class FakeS3:
    def __init__(self, error=None):
        self.error = error
        self.uploads = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        if self.error:
            raise self.error
        self.uploads.append((bucket, key, fileobj.read(), ExtraArgs))


def test_s3_upload_returns_public_url():
    s3 = FakeS3()
    storage = S3Storage(bucket="receipts", region="eu-west-1", client=s3)

    url = storage.upload("u1/1.jpg", io.BytesIO(b"img"), "image/jpeg")

    assert url == "https://receipts.s3.eu-west-1.amazonaws.com/u1/1.jpg"
    assert s3.uploads == [("receipts", "u1/1.jpg", b"img", {"ContentType": "image/jpeg"})]


@pytest.mark.parametrize(
    "error",
    [
        S3UploadFailedError("Failed to upload: AccessDenied"),
        NoCredentialsError(),
        ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"),
    ],
)
def test_s3_upload_failures_return_none(error):
    storage = S3Storage(bucket="receipts", region="eu-west-1", client=FakeS3(error))
    assert storage.upload("u1/1.jpg", io.BytesIO(b"img"), "image/jpeg") is None


def test_file_storage_is_abstract():
    with pytest.raises(TypeError):
        FileStorage()


def test_memory_storage():
    storage = MemoryStorage()
    assert storage.upload("u1/avatar.png", io.BytesIO(b"png"), "image/png") == "memory://uploads/u1/avatar.png"
    assert storage.files == {"u1/avatar.png": b"png"}


def test_keys():
    assert receipt_key("u1", "Scan.JPEG", now_ms=1700000000000) == "u1/1700000000000.jpeg"
    assert receipt_key("u1", None, now_ms=5) == "u1/5.bin"
    assert avatar_key("u1", "me.webp") == "u1/avatar.webp"
    assert avatar_key("u1", "noextension") == "u1/avatar.png"
