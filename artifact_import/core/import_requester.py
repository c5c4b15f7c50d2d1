"""EC2 image import request construction and submission."""

from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from artifact_import.common import (
    PROVIDER_IMAGE_FORMATS,
    ImageFormat,
    ImageMetadata,
    ImportJob,
    ImportRequestError,
    LogLevel,
    Stage,
    UnsupportedFormatError,
)
from artifact_import.utils import log_message

WINDOWS_OS_TYPE = "Windows"


def to_provider_format(image_format: ImageFormat) -> str:
    """
    Map an artifact format to the EC2 VM Import disk format.

    Raises:
        UnsupportedFormatError: For formats EC2 cannot import, such as qcow2
    """
    try:
        return PROVIDER_IMAGE_FORMATS[ImageFormat(image_format)]
    except (KeyError, ValueError) as e:
        raise UnsupportedFormatError(
            Stage.IMPORT, f"Format {image_format!r} has no EC2 VM Import disk format"
        ) from e


def build_import_request(url: str, metadata: ImageMetadata) -> Dict[str, Any]:
    """Build the keyword arguments for ``ec2.import_image``."""
    tags: List[Dict[str, str]] = [
        {"Key": "Name", "Value": metadata.name},
        {"Key": "OsType", "Value": metadata.os_type},
        {"Key": "OsName", "Value": metadata.os_name},
        {"Key": "CreatedBy", "Value": "artifact-import"},
    ]
    description = metadata.description or f"{metadata.name} imported via artifact-import"

    import_params: Dict[str, Any] = {
        "Description": description,
        "DiskContainers": [
            {
                "Description": description,
                "Format": to_provider_format(metadata.format),
                "Url": url,
            }
        ],
        "Platform": "Windows" if metadata.os_type == WINDOWS_OS_TYPE else "Linux",
        "TagSpecifications": [{"ResourceType": "import-image-task", "Tags": tags}],
    }

    if metadata.license_type:
        import_params["LicenseType"] = metadata.license_type

    return import_params


class ImportRequester:
    """Submits the import request. Never retries: a resubmission starts a second import."""

    def __init__(self, client):
        self.client = client

    def request_import(self, url: str, metadata: ImageMetadata) -> ImportJob:
        """
        Start an image import from ``url``.

        Returns:
            ImportJob: The new job, pending

        Raises:
            UnsupportedFormatError: If the format cannot be imported
            ImportRequestError: If EC2 rejects the request
        """
        import_params = build_import_request(url, metadata)

        try:
            task_id = self.client.import_image(import_params)
        except (ClientError, BotoCoreError) as e:
            raise ImportRequestError(Stage.IMPORT, f"Failed to import image {metadata.name!r}, {e}") from e

        log_message(LogLevel.SUCCESS, f"Import task started: {task_id}")
        return ImportJob(job_id=task_id)
