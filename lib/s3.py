import boto3
import os

from pathlib import Path
from botocore.exceptions import BotoCoreError, ClientError

from lib.errors import StorageFailed


def parse_s3_location(location: str) -> tuple[str, str]:
    """
    location -> s3://{bucket}/{key...}

    return -> (bucket, key).
    """

    if not location.startswith("s3://"):
        raise StorageFailed(f"Not an s3 location: {location}")

    bucket, _, key = location[len("s3://") :].partition("/")
    if not bucket or not key:
        raise StorageFailed(f"Invalid s3 location: {location}")

    return bucket, key


def create_client(endpoint_url: str | None = None, region_name: str | None = None):
    return boto3.client("s3", endpoint_url=endpoint_url, region_name=region_name)


def download_s3_file(s3_client, location: str, output_path: str | Path) -> Path:
    bucket, key = parse_s3_location(location)
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

    print("[s3] download:", location)
    try:
        s3_client.download_file(bucket, key, str(output_path))
    except (BotoCoreError, ClientError) as e:
        raise StorageFailed(f"Failed to download {location}: {e}") from e

    return Path(output_path)


def upload_file_to_s3(
    s3_client, location: str, path: str | Path, content_type: str = "application/pdf"
):
    bucket, key = parse_s3_location(location)

    print("[s3] upload:", location)
    try:
        s3_client.upload_file(
            str(path), bucket, key, ExtraArgs={"ContentType": content_type}
        )
    except (BotoCoreError, ClientError, OSError) as e:
        raise StorageFailed(f"Failed to upload {path} to {location}: {e}") from e


class S3ArtifactStore:
    def __init__(self, s3_client):
        self.s3_client = s3_client

    def download(self, location: str, output_path: Path) -> Path:
        return download_s3_file(self.s3_client, location, output_path)

    def upload(
        self, path: Path, location: str, content_type: str = "application/pdf"
    ) -> None:
        upload_file_to_s3(self.s3_client, location, path, content_type=content_type)
