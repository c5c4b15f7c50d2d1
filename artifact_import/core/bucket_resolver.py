"""Bucket lookup for the upload stage."""

from botocore.exceptions import BotoCoreError, ClientError

from artifact_import.common import (
    BucketMetadata,
    BucketNotFoundError,
    BucketVisibility,
    Stage,
    TransportError,
)

MISSING_BUCKET_CODES = ["404", "NoSuchBucket", "NotFound"]


class BucketResolver:
    """Resolves a bucket's domain and visibility. Read-only."""

    def __init__(self, client):
        self.client = client

    def resolve(self, bucket_name: str) -> BucketMetadata:
        """
        Look up a bucket.

        Raises:
            BucketNotFoundError: If the bucket does not exist
            TransportError: If the lookup itself fails
        """
        try:
            bucket = self.client.describe_bucket(bucket_name)
        except ClientError as e:
            if e.response["Error"]["Code"] in MISSING_BUCKET_CODES:
                raise BucketNotFoundError(Stage.UPLOAD, f"The bucket {bucket_name} does not exist") from e
            raise TransportError(Stage.UPLOAD, f"Error on reading bucket {bucket_name!r}, {e}") from e
        except BotoCoreError as e:
            raise TransportError(Stage.UPLOAD, f"Error on reading bucket {bucket_name!r}, {e}") from e

        return BucketMetadata(
            name=bucket["Name"],
            region=bucket["Region"],
            domain=bucket["Domain"],
            visibility=BucketVisibility.PUBLIC if bucket["IsPublic"] else BucketVisibility.PRIVATE,
        )
