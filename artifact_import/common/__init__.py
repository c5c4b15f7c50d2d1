"""Shared constants, enums, errors and data model."""

from .config import ImportConfig
from .constants import (
    DEFAULT_OBJECT_KEY_PREFIX,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    ERR_ARTIFACT_NOT_FOUND,
    ERR_AWS_CLIENT_INIT_FAILED,
    ERR_AWS_CREDENTIALS_NOT_FOUND,
    ERR_CLEANUP_STAGE_FAILED,
    ERR_GENERAL_OPERATION_FAILED,
    ERR_IMPORT_STAGE_FAILED,
    ERR_INPUT_INVALID,
    ERR_OPERATION_CANCELLED,
    ERR_POLL_STAGE_FAILED,
    ERR_UPLOAD_STAGE_FAILED,
    IMAGE_NAME_PATTERN,
    IMPORT_TASK_AVAILABLE_STATES,
    IMPORT_TASK_PENDING_STATES,
    IMPORT_TASK_UNAVAILABLE_STATES,
    MULTIPART_CHUNK_SIZE_BYTES,
    MULTIPART_MAX_CONCURRENCY,
    MULTIPART_THRESHOLD_BYTES,
    OBJECT_KEY_TIMESTAMP_PLACEHOLDER,
    POLL_BACKOFF_MULTIPLIER,
    POLL_INITIAL_BACKOFF_SECONDS,
    POLL_MAX_BACKOFF_SECONDS,
    PRIVATE_URL_EXPIRES_SECONDS,
    PROVIDER_IMAGE_FORMATS,
    S3_DEFAULT_REGION,
    SENSITIVE_URL_PARAMS,
    STAGE_ERROR_CODES,
    SUPPORTED_OS_TYPES,
    VALID_LICENSE_TYPES,
)
from .enums import BucketVisibility, ImageFormat, ImageState, LogLevel, Stage
from .errors import (
    BucketNotFoundError,
    DeleteError,
    ImageUnavailableError,
    ImportRequestError,
    ImportTimeoutError,
    PipelineCancelledError,
    PipelineError,
    TransportError,
    UnsupportedFormatError,
    UploadError,
    ValidationError,
)
from .models import (
    ArtifactRef,
    BucketMetadata,
    ImageMetadata,
    ImageStatus,
    ImportJob,
    ImportResult,
    UploadResult,
)
