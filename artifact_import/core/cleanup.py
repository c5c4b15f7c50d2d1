"""Removal of the uploaded artifact after a successful import."""

from botocore.exceptions import BotoCoreError, ClientError

from artifact_import.common import DeleteError, LogLevel
from artifact_import.utils import log_message


class Cleanup:
    """Deletes the temporary object the import was read from."""

    def __init__(self, client):
        self.client = client

    def delete(self, bucket_name: str, object_key: str) -> None:
        """
        Delete ``bucket_name/object_key``.

        Raises:
            DeleteError: If S3 refuses the deletion
        """
        log_message(LogLevel.INFO, f"Deleting import source S3 object: {bucket_name}/{object_key}")
        try:
            self.client.delete_object(bucket_name, object_key)
        except (ClientError, BotoCoreError) as e:
            raise DeleteError(f"Failed to delete S3 object: {bucket_name}/{object_key}, {e}") from e
