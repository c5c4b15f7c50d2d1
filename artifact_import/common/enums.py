"""
This module defines enums for artifact import operations.
"""

from enum import Enum


class ImageFormat(str, Enum):
    """Disk image formats a build artifact can be produced in."""

    RAW = "raw"
    VHD = "vhd"
    VMDK = "vmdk"
    QCOW2 = "qcow2"


class BucketVisibility(str, Enum):
    """Visibility of an S3 bucket, which decides the shape of the import URL."""

    PUBLIC = "public"
    PRIVATE = "private"


class ImageState(str, Enum):
    """State of an import job as seen by the readiness poller."""

    PENDING = "pending"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class Stage(str, Enum):
    """Pipeline stages, used to attribute failures."""

    UPLOAD = "upload"
    IMPORT = "import"
    POLL = "poll"
    CLEANUP = "cleanup"


class LogLevel(str, Enum):
    """Log levels for artifact import operations."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARN = "WARN"
    ERROR = "ERROR"
