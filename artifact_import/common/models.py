"""
Data model shared by the pipeline stages.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from artifact_import.common.enums import BucketVisibility, ImageFormat, ImageState


@dataclass(frozen=True)
class ArtifactRef:
    """A local disk image file and its declared format."""

    path: Path
    format: ImageFormat


@dataclass(frozen=True)
class BucketMetadata:
    """What S3 reports about a bucket at the time of the lookup."""

    name: str
    region: str
    domain: str
    visibility: BucketVisibility

    @property
    def is_public(self) -> bool:
        return self.visibility == BucketVisibility.PUBLIC


@dataclass(frozen=True)
class UploadResult:
    """Location of an uploaded artifact and the URL EC2 will read it from."""

    bucket: str
    object_key: str
    url: str
    visibility: BucketVisibility


@dataclass(frozen=True)
class ImageMetadata:
    """User-supplied attributes of the image being imported."""

    name: str
    os_type: str
    os_name: str
    format: ImageFormat
    description: str = ""
    license_type: Optional[str] = None


@dataclass(frozen=True)
class ImageStatus:
    """A single observation of an import job."""

    state: ImageState
    image_id: Optional[str] = None
    message: str = ""
    progress: int = 0


@dataclass
class ImportJob:
    """An EC2 import task. Only the status fields change after creation."""

    job_id: str
    status: ImageState = ImageState.PENDING
    last_checked: Optional[float] = None
    status_message: str = ""


@dataclass
class ImportResult:
    """Successful outcome of a pipeline run, suitable for chaining."""

    image_id: str
    import_task_id: str
    region: str
    bucket: str
    object_key: str
    client: Any = None
    cleaned_up: bool = False
