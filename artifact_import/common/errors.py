"""
Exception taxonomy for the import pipeline.

Every pipeline failure is a ``PipelineError`` tagged with the stage it happened
in. Once EC2 has assigned an import task id it travels with every later error,
so operators can locate orphaned import jobs.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from artifact_import.common.enums import Stage

if TYPE_CHECKING:
    from artifact_import.common.models import ImportResult


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


class PipelineError(Exception):
    """Base class for failures raised by a pipeline stage."""

    def __init__(self, stage: Stage, message: str, import_task_id: Optional[str] = None):
        super().__init__(message)
        self.stage = stage
        self.message = message
        self.import_task_id = import_task_id

    def __str__(self) -> str:
        text = f"{self.stage.value} stage: {self.message}"
        if self.import_task_id:
            text += f" (import task: {self.import_task_id})"
        return text


class TransportError(PipelineError):
    """An AWS API call failed."""


class BucketNotFoundError(PipelineError):
    """The bucket does not exist or is not visible to the caller."""


class UploadError(PipelineError):
    """The artifact could not be transferred to S3."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(Stage.UPLOAD, message)
        self.details = details or {}


class UnsupportedFormatError(PipelineError):
    """The artifact format has no EC2 VM Import equivalent."""


class ImportRequestError(PipelineError):
    """EC2 rejected the import request."""


class ImageUnavailableError(PipelineError):
    """EC2 reported that the import job failed."""


class ImportTimeoutError(PipelineError):
    """The import job was still pending when the deadline elapsed."""


class PipelineCancelledError(PipelineError):
    """An external cancellation signal stopped the pipeline."""


class DeleteError(PipelineError):
    """The uploaded object could not be removed after a successful import.

    The import itself succeeded: ``result`` holds the image details so the
    caller still gets the image id.
    """

    def __init__(self, message: str, result: Optional["ImportResult"] = None):
        super().__init__(Stage.CLEANUP, message, result.import_task_id if result else None)
        self.result = result
