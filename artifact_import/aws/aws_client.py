"""AWS client wrapper for artifact import operations."""

import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import ClientError, NoCredentialsError
from rich.rule import Rule

from artifact_import.common import (
    ERR_AWS_CLIENT_INIT_FAILED,
    ERR_AWS_CREDENTIALS_NOT_FOUND,
    MULTIPART_CHUNK_SIZE_BYTES,
    MULTIPART_MAX_CONCURRENCY,
    MULTIPART_THRESHOLD_BYTES,
    S3_DEFAULT_REGION,
)
from artifact_import.utils import error_and_exit

MISSING_BUCKET_POLICY_CODES = ["NoSuchBucketPolicy"]


class AWSClient:
    """
    AWS client wrapper for artifact import operations.

    Exposes the handful of S3 and EC2 calls the import pipeline needs. Calls are
    single attempt; botocore exceptions propagate to the caller.
    """

    def __init__(self, region: str, session: Optional[boto3.Session] = None) -> None:
        """Initialize AWS client wrapper."""
        self.region = region

        # Initialize storage for lazy loading
        self._session = session
        self._ec2 = None
        self._s3 = None

    @property
    def session(self) -> boto3.Session:
        """Lazy initialization of boto3 session."""
        if self._session is None:
            try:
                self._session = boto3.Session()
            except NoCredentialsError as e:
                error_and_exit(
                    "AWS credentials not found",
                    "Please configure AWS CLI using 'aws configure' or set environment variables",
                    "Required: AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, and optionally AWS_SESSION_TOKEN",
                    Rule(),
                    str(e),
                    code=ERR_AWS_CREDENTIALS_NOT_FOUND,
                )
            except Exception as e:
                error_and_exit("Failed to initialize AWS session", Rule(), str(e), code=ERR_AWS_CLIENT_INIT_FAILED)
        return self._session

    @property
    def ec2(self) -> boto3.client:
        """Lazy initialization of EC2 client."""
        if self._ec2 is None:
            try:
                self._ec2 = self.session.client("ec2", region_name=self.region)
            except Exception as e:
                error_and_exit("Failed to initialize EC2 client", Rule(), str(e), code=ERR_AWS_CLIENT_INIT_FAILED)
        return self._ec2

    @property
    def s3(self) -> boto3.client:
        """
        Lazy initialization of S3 client.

        Pre-signed URLs are always SigV4 so their lifetime is carried by ``X-Amz-Expires``.
        """
        if self._s3 is None:
            try:
                self._s3 = self.session.client(
                    "s3", region_name=self.region, config=Config(signature_version="s3v4")
                )
            except Exception as e:
                error_and_exit("Failed to initialize S3 client", Rule(), str(e), code=ERR_AWS_CLIENT_INIT_FAILED)
        return self._s3

    def describe_bucket(self, bucket_name: str) -> Dict[str, Any]:
        """
        Describe a bucket's location and public access status.

        Returns:
            Dict: {"Name": str, "Region": str, "Domain": str, "IsPublic": bool}
        """
        self.s3.head_bucket(Bucket=bucket_name)

        location = self.s3.get_bucket_location(Bucket=bucket_name).get("LocationConstraint")
        region = location or S3_DEFAULT_REGION

        try:
            status = self.s3.get_bucket_policy_status(Bucket=bucket_name)
            is_public = bool(status.get("PolicyStatus", {}).get("IsPublic", False))
        except ClientError as e:
            if e.response["Error"]["Code"] not in MISSING_BUCKET_POLICY_CODES:
                raise
            is_public = False

        return {
            "Name": bucket_name,
            "Region": region,
            "Domain": f"{bucket_name}.s3.{region}.amazonaws.com",
            "IsPublic": is_public,
        }

    def upload_file(
        self, local_file: str, bucket: str, key: str, callback: Optional[Callable[[int], None]] = None
    ) -> None:
        """Upload a file in parts, streaming it from disk."""
        transfer_config = TransferConfig(
            multipart_threshold=MULTIPART_THRESHOLD_BYTES,
            multipart_chunksize=MULTIPART_CHUNK_SIZE_BYTES,
            max_concurrency=MULTIPART_MAX_CONCURRENCY,
        )
        self.s3.upload_file(
            local_file,
            bucket,
            key,
            ExtraArgs={
                "Metadata": {
                    "uploaded-by": "artifact-import",
                    "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
                },
            },
            Callback=callback,
            Config=transfer_config,
        )

    def get_private_url(self, bucket: str, key: str, expires_in: int) -> str:
        """Issue a pre-signed GET URL valid for ``expires_in`` seconds."""
        return self.s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    @staticmethod
    def get_public_url(domain: str, key: str) -> str:
        """Direct URL of an object in a public bucket."""
        return f"https://{domain}/{quote(key)}"

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object."""
        self.s3.delete_object(Bucket=bucket, Key=key)

    def import_image(self, import_params: Dict[str, Any]) -> str:
        """Start an EC2 image import task and return its id."""
        response = self.ec2.import_image(**import_params)
        return response["ImportTaskId"]

    def describe_import_task(self, task_id: str) -> Dict[str, Any]:
        """Fetch the current state of an EC2 image import task."""
        response = self.ec2.describe_import_image_tasks(ImportTaskIds=[task_id])
        tasks: List[Dict[str, Any]] = response.get("ImportImageTasks", [])
        if not tasks:
            raise LookupError(f"Import task not found: {task_id}")
        return tasks[0]
