"""Validation utility functions for artifact import operations."""

from pathlib import Path
from typing import List, Optional

from artifact_import.common import (
    IMAGE_NAME_PATTERN,
    PROVIDER_IMAGE_FORMATS,
    SUPPORTED_OS_TYPES,
    VALID_LICENSE_TYPES,
    ImageFormat,
    ImportConfig,
    ValidationError,
)

REQUIRED_FIELDS = ["region", "bucket", "image_name", "os_type", "os_name", "image_format"]


def validate_config(config: ImportConfig) -> List[str]:
    """
    Check an import configuration.

    Args:
        config: The configuration to check

    Returns:
        List[str]: Every problem found; empty when the configuration is valid
    """
    errors = [f"{name} must be set" for name in REQUIRED_FIELDS if not getattr(config, name)]

    if config.image_name and not IMAGE_NAME_PATTERN.match(config.image_name):
        errors.append(
            "expected image_name to be 1-63 characters and only support chinese, english, numbers, "
            f"'-_,.:[]', got {config.image_name!r}"
        )

    if config.image_format:
        errors.extend(_format_errors(config.image_format))

    if config.os_type and config.os_type not in SUPPORTED_OS_TYPES:
        errors.append(f"expected image_os_type to be one of {', '.join(SUPPORTED_OS_TYPES)}, got {config.os_type!r}")

    if config.license_type and config.license_type not in VALID_LICENSE_TYPES:
        errors.append(
            f"expected license_type to be one of {', '.join(VALID_LICENSE_TYPES)}, got {config.license_type!r}"
        )

    return errors


def _format_errors(image_format: str) -> List[str]:
    try:
        fmt = ImageFormat(image_format)
    except ValueError:
        known = ", ".join(f"'{f.value}'" for f in ImageFormat)
        return [f"expected format to be one of {known}, got {image_format!r}"]

    if fmt not in PROVIDER_IMAGE_FORMATS:
        supported = ", ".join(f"'{f.value}'" for f in PROVIDER_IMAGE_FORMATS)
        return [f"format {fmt.value!r} cannot be imported by EC2 VM Import; convert the image to one of {supported}"]
    return []


def validate_source(source: Optional[str]) -> str:
    """
    Validate the artifact source path.

    Args:
        source: An image file or a build output directory

    Returns:
        str: The validated source

    Raises:
        ValidationError: If the source does not exist or is an empty file
    """
    if not source:
        raise ValidationError("Artifact source is required")

    try:
        source_path = Path(source).expanduser().resolve()
    except Exception as e:
        raise ValidationError(f"Invalid artifact path: {source}") from e

    if not source_path.exists():
        raise ValidationError(f"Invalid artifact source: Path not found: {source_path}")

    if source_path.is_file() and source_path.stat().st_size == 0:
        raise ValidationError(f"Invalid artifact source: File is empty: {source_path}")

    return source


def validate_license_type(license_type: Optional[str]) -> Optional[str]:
    """
    Validate license type parameter.

    Args:
        license_type: The license type to validate

    Returns:
        Optional[str]: The validated license type

    Raises:
        ValidationError: If the license type is invalid
    """
    if license_type is None:
        return None

    if license_type not in VALID_LICENSE_TYPES:
        raise ValidationError(
            f"Invalid license type: {license_type}. " f"Valid values are: {', '.join(VALID_LICENSE_TYPES)}"
        )

    return license_type
