"""Artifact upload to S3 and retrieval URL issuance."""

from pathlib import Path
from typing import Any, Dict

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn, TransferSpeedColumn

from artifact_import.common import (
    PRIVATE_URL_EXPIRES_SECONDS,
    LogLevel,
    TransportError,
    UploadError,
    UploadResult,
)
from artifact_import.core.bucket_resolver import BucketResolver
from artifact_import.utils import format_bytes, get_file_size, log_message, redact_url


def _error_details(error: BaseException) -> Dict[str, Any]:
    """Collect the provider's error payload from a failed transfer, if there is one."""
    candidates = [error, error.__cause__, error.__context__]
    for candidate in candidates:
        if isinstance(candidate, ClientError):
            return {
                "Error": candidate.response.get("Error", {}),
                "ResponseMetadata": candidate.response.get("ResponseMetadata", {}),
            }
    return {}


class Uploader:
    """Uploads an artifact and returns the URL EC2 should import it from."""

    def __init__(self, client, resolver: BucketResolver):
        self.client = client
        self.resolver = resolver

    def upload(self, local_path: Path, bucket_name: str, object_key: str) -> UploadResult:
        """
        Upload ``local_path`` to ``bucket_name/object_key``.

        Private buckets get a pre-signed URL valid for 24 hours, public buckets a
        direct URL without expiry. Bucket visibility is read again after the
        transfer.

        Raises:
            BucketNotFoundError: If the bucket does not exist
            UploadError: If the transfer or URL issuance fails
        """
        self.resolver.resolve(bucket_name)

        try:
            file_size = get_file_size(local_path)
            log_message(
                LogLevel.INFO,
                f"Uploading image file {local_path} (size: {format_bytes(file_size)}) to S3: {bucket_name}/{object_key}",
            )

            with Progress(
                TextColumn("[bold blue]{task.fields[filename]}", justify="right"),
                BarColumn(bar_width=None),
                "[progress.percentage]{task.percentage:>3.1f}%",
                "•",
                DownloadColumn(),
                "•",
                TransferSpeedColumn(),
                "•",
                TimeRemainingColumn(),
            ) as progress:
                task = progress.add_task("upload", filename=local_path.name, total=file_size)
                self.client.upload_file(
                    str(local_path),
                    bucket_name,
                    object_key,
                    callback=lambda sent: progress.update(task, advance=sent),
                )
        except (S3UploadFailedError, ClientError, BotoCoreError, OSError) as e:
            raise UploadError(
                f"Error on upload file to {bucket_name}/{object_key}, {e}", details=_error_details(e)
            ) from e

        log_message(LogLevel.SUCCESS, f"Image file {local_path} has been uploaded to S3: {bucket_name}/{object_key}")

        try:
            bucket = self.resolver.resolve(bucket_name)
        except TransportError as e:
            raise UploadError(f"Error on reading bucket {bucket_name!r} after upload, {e.message}") from e

        try:
            if bucket.is_public:
                url = self.client.get_public_url(bucket.domain, object_key)
            else:
                url = self.client.get_private_url(bucket_name, object_key, PRIVATE_URL_EXPIRES_SECONDS)
        except (ClientError, BotoCoreError) as e:
            raise UploadError(f"Error on issuing URL for {bucket_name}/{object_key}, {e}") from e

        log_message(LogLevel.DEBUG, f"Import URL ({bucket.visibility.value} bucket): {redact_url(url)}")
        return UploadResult(bucket=bucket_name, object_key=object_key, url=url, visibility=bucket.visibility)
