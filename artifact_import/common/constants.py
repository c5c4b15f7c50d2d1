"""
This module defines project-level constants.
"""

import re
from typing import Dict, List

from artifact_import.common.enums import ImageFormat, Stage

# Error codes
# General errors (-20000 to -20099)
ERR_GENERAL_OPERATION_FAILED = -20000
ERR_INPUT_INVALID = -20001
ERR_ARTIFACT_NOT_FOUND = -20002
ERR_OPERATION_CANCELLED = -20003

# AWS errors (-20100 to -20199)
ERR_AWS_CLIENT_INIT_FAILED = -20100
ERR_AWS_CREDENTIALS_NOT_FOUND = -20101

# Pipeline stage errors (-20200 to -20299)
ERR_UPLOAD_STAGE_FAILED = -20200
ERR_IMPORT_STAGE_FAILED = -20201
ERR_POLL_STAGE_FAILED = -20202
ERR_CLEANUP_STAGE_FAILED = -20203

STAGE_ERROR_CODES: Dict[Stage, int] = {
    Stage.UPLOAD: ERR_UPLOAD_STAGE_FAILED,
    Stage.IMPORT: ERR_IMPORT_STAGE_FAILED,
    Stage.POLL: ERR_POLL_STAGE_FAILED,
    Stage.CLEANUP: ERR_CLEANUP_STAGE_FAILED,
}

# Object key defaults
DEFAULT_OBJECT_KEY_PREFIX = "artifact-import"
OBJECT_KEY_TIMESTAMP_PLACEHOLDER = "{timestamp}"

# Pre-signed URLs must outlive the import job that reads them
PRIVATE_URL_EXPIRES_SECONDS = 24 * 60 * 60

# Multipart transfer tuning
MULTIPART_THRESHOLD_BYTES = 64 * 1024 * 1024
MULTIPART_CHUNK_SIZE_BYTES = 64 * 1024 * 1024
MULTIPART_MAX_CONCURRENCY = 4

# Readiness polling
DEFAULT_WAIT_TIMEOUT_SECONDS = 3600
POLL_INITIAL_BACKOFF_SECONDS = 2
POLL_MAX_BACKOFF_SECONDS = 12
POLL_BACKOFF_MULTIPLIER = 2

# S3 region used when a bucket reports no location constraint
S3_DEFAULT_REGION = "us-east-1"

# Disk formats accepted by EC2 VM Import, keyed by artifact format
PROVIDER_IMAGE_FORMATS: Dict[ImageFormat, str] = {
    ImageFormat.RAW: "RAW",
    ImageFormat.VHD: "VHD",
    ImageFormat.VMDK: "VMDK",
}

# EC2 import task states
IMPORT_TASK_AVAILABLE_STATES: List[str] = ["completed"]
IMPORT_TASK_UNAVAILABLE_STATES: List[str] = ["deleted", "deleting"]
IMPORT_TASK_PENDING_STATES: List[str] = ["active"]

SUPPORTED_OS_TYPES: List[str] = ["CentOS", "Ubuntu", "Windows", "RedHat", "Debian", "Other"]
VALID_LICENSE_TYPES: List[str] = ["AWS", "BYOL"]

# 1-63 characters: letters, digits, CJK and -_,.:[]
IMAGE_NAME_PATTERN = re.compile(r"^[一-龥a-zA-Z0-9\-_,.:\[\]]{1,63}$")

# Query parameters of a pre-signed URL that must never reach the logs
SENSITIVE_URL_PARAMS: List[str] = ["X-Amz-Signature", "X-Amz-Credential", "X-Amz-Security-Token", "Signature"]
