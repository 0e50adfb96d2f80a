from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from lib.errors import StorageFailed
from lib.s3 import S3ArtifactStore, parse_s3_location


class FakeS3Client:
    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None):
        self.objects = dict(objects or {})
        self.extra_args = {}

    def download_file(self, bucket, key, filename):
        if (bucket, key) not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        Path(filename).write_bytes(self.objects[(bucket, key)])

    def upload_file(self, filename, bucket, key, ExtraArgs=None):
        self.objects[(bucket, key)] = Path(filename).read_bytes()
        self.extra_args[(bucket, key)] = ExtraArgs


def test_parse_s3_location() -> None:
    assert parse_s3_location("s3://bucket/user/task/file.pdf") == ("bucket", "user/task/file.pdf")


@pytest.mark.parametrize("location", ["bucket/key", "s3://bucket", "s3://bucket/", "s3:///key"])
def test_invalid_locations(location: str) -> None:
    with pytest.raises(StorageFailed):
        parse_s3_location(location)


def test_download_and_upload_round_trip(tmp_path: Path) -> None:
    client = FakeS3Client({("uploads", "u/report.pdf"): b"%PDF-1.7"})
    store = S3ArtifactStore(client)

    local = store.download("s3://uploads/u/report.pdf", tmp_path / "work" / "input.pdf")
    store.upload(local, "s3://chunks/u/t/report.pdf")

    assert local.read_bytes() == b"%PDF-1.7"
    assert client.objects[("chunks", "u/t/report.pdf")] == b"%PDF-1.7"
    assert client.extra_args[("chunks", "u/t/report.pdf")] == {"ContentType": "application/pdf"}


def test_upload_passes_content_type(tmp_path: Path) -> None:
    client = FakeS3Client()
    output = tmp_path / "segments.json"
    output.write_text("[]", encoding="utf-8")

    S3ArtifactStore(client).upload(output, "s3://chunks/out.json", content_type="application/json")

    assert client.extra_args[("chunks", "out.json")] == {"ContentType": "application/json"}


def test_missing_object_is_storage_failure(tmp_path: Path) -> None:
    store = S3ArtifactStore(FakeS3Client())

    with pytest.raises(StorageFailed):
        store.download("s3://uploads/missing.pdf", tmp_path / "input.pdf")
