"""
Configuration for an import run.
"""

from dataclasses import dataclass, fields
from typing import Optional

from artifact_import.common.constants import DEFAULT_WAIT_TIMEOUT_SECONDS
from artifact_import.common.enums import ImageFormat
from artifact_import.common.models import ImageMetadata


@dataclass
class ImportConfig:
    """
    Settings for one artifact import.

    ``object_key`` is expected to be rendered already; use
    ``artifact_import.utils.render_object_key`` to build it.
    """

    region: str
    bucket: str
    image_name: str
    os_type: str
    os_name: str
    image_format: str
    object_key: str = ""
    image_description: str = ""
    skip_clean: bool = False
    wait_timeout: int = DEFAULT_WAIT_TIMEOUT_SECONDS
    license_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.wait_timeout <= 0:
            self.wait_timeout = DEFAULT_WAIT_TIMEOUT_SECONDS

    @property
    def format(self) -> ImageFormat:
        return ImageFormat(self.image_format)

    def image_metadata(self) -> ImageMetadata:
        """Build the image attributes sent with the import request."""
        return ImageMetadata(
            name=self.image_name,
            os_type=self.os_type,
            os_name=self.os_name,
            format=self.format,
            description=self.image_description,
            license_type=self.license_type,
        )

    def describe(self) -> str:
        """Render the configuration as a single line for debug logging."""
        return ", ".join(f"{field.name}={getattr(self, field.name)!r}" for field in fields(self))
