"""File utility functions for artifact import operations."""

import time
from pathlib import Path
from typing import Iterable, Optional, Union

from artifact_import.common import (
    DEFAULT_OBJECT_KEY_PREFIX,
    OBJECT_KEY_TIMESTAMP_PLACEHOLDER,
    ArtifactRef,
    ImageFormat,
)


def _candidate_files(source: Path) -> Iterable[Path]:
    if source.is_dir():
        return sorted(path for path in source.iterdir() if path.is_file())
    return [source]


def locate_artifact(source: Union[str, Path], image_format: ImageFormat) -> ArtifactRef:
    """
    Find the disk image of the given format.

    Args:
        source: An image file, or a build output directory holding one
        image_format: The declared format; the file must carry its extension

    Returns:
        ArtifactRef: The first matching file

    Raises:
        FileNotFoundError: If no file with the format's extension exists
    """
    source_path = Path(source).expanduser().resolve()
    if not source_path.exists():
        raise FileNotFoundError(f"Artifact source not found: {source_path}")

    suffix = f".{image_format.value}"
    for path in _candidate_files(source_path):
        if path.name.lower().endswith(suffix):
            return ArtifactRef(path=path, format=image_format)

    raise FileNotFoundError(f"No {image_format.value} image file found in artifact: {source_path}")


def default_object_key(image_format: ImageFormat) -> str:
    """Object key template used when none is supplied."""
    return f"{DEFAULT_OBJECT_KEY_PREFIX}-{OBJECT_KEY_TIMESTAMP_PLACEHOLDER}.{image_format.value}"


def render_object_key(template: Optional[str], image_format: ImageFormat, now: Optional[float] = None) -> str:
    """
    Render an object key, substituting the Unix timestamp for ``{timestamp}``.

    Args:
        template: User-supplied key; empty means the default key
        image_format: Artifact format, used by the default key's extension
        now: Timestamp to render, defaults to the current time

    Returns:
        str: The literal object key
    """
    template = template or default_object_key(image_format)
    timestamp = str(int(time.time() if now is None else now))
    return template.replace(OBJECT_KEY_TIMESTAMP_PLACEHOLDER, timestamp)


def get_file_size(file_path: Path) -> int:
    """Get file size in bytes."""
    return file_path.stat().st_size


def format_bytes(bytes_count: int) -> str:
    """Format bytes as human-readable string."""
    bytes_float = float(bytes_count)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes_float < 1024.0:
            return f"{bytes_float:.1f} {unit}"
        bytes_float /= 1024.0
    return f"{bytes_float:.1f} PB"
