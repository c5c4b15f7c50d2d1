"""
Utils package for artifact_import.

This package contains utility functions organized into specialized modules:

- file_utils: Artifact location and object key utilities
- logging_utils: Logging configuration, redaction and display utilities
- retry_utils: Backoff and deadline helpers for polling
- validation_utils: Configuration and input validation utilities
"""

from .file_utils import default_object_key, format_bytes, get_file_size, locate_artifact, render_object_key
from .logging_utils import (
    display_summary,
    error_and_exit,
    get_logger,
    log_message,
    log_section,
    log_step,
    redact_url,
    setup_logging,
)
from .retry_utils import Backoff, RetryCancelled, RetryTimeout, wait_with_backoff
from .validation_utils import validate_config, validate_license_type, validate_source

__all__ = [
    "default_object_key",
    "format_bytes",
    "get_file_size",
    "locate_artifact",
    "render_object_key",
    "display_summary",
    "error_and_exit",
    "get_logger",
    "log_message",
    "log_section",
    "log_step",
    "redact_url",
    "setup_logging",
    "Backoff",
    "RetryCancelled",
    "RetryTimeout",
    "wait_with_backoff",
    "validate_config",
    "validate_license_type",
    "validate_source",
]
