"""Readiness polling for EC2 image import tasks."""

import threading
import time
from typing import Any, Callable, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from artifact_import.common import (
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    IMPORT_TASK_AVAILABLE_STATES,
    IMPORT_TASK_PENDING_STATES,
    IMPORT_TASK_UNAVAILABLE_STATES,
    ImageState,
    ImageStatus,
    ImageUnavailableError,
    ImportJob,
    ImportTimeoutError,
    LogLevel,
    PipelineCancelledError,
    Stage,
)
from artifact_import.utils import Backoff, RetryCancelled, RetryTimeout, log_message, wait_with_backoff


def _parse_progress(progress_value: Any) -> int:
    # EC2 reports progress as a string, sometimes "unknown"
    if isinstance(progress_value, str):
        try:
            return int(progress_value)
        except ValueError:
            return 0
    return int(progress_value or 0)


def import_task_status(task: Dict[str, Any]) -> ImageStatus:
    """Translate a describe_import_image_tasks entry into an ImageStatus."""
    status = task.get("Status", "")

    if status in IMPORT_TASK_AVAILABLE_STATES:
        state = ImageState.AVAILABLE
    elif status in IMPORT_TASK_UNAVAILABLE_STATES:
        state = ImageState.UNAVAILABLE
    elif status in IMPORT_TASK_PENDING_STATES:
        state = ImageState.PENDING
    else:
        state = ImageState.UNKNOWN

    return ImageStatus(
        state=state,
        image_id=task.get("ImageId"),
        message=task.get("StatusMessage", "") or status,
        progress=_parse_progress(task.get("Progress", 0)),
    )


class ReadinessPoller:
    """Polls an import job until it is available, unavailable, timed out or cancelled."""

    def __init__(
        self,
        client,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], bool]] = None,
    ):
        """Initialize the poller with an AWS client and optional time sources."""
        self.client = client
        self.clock = clock
        self.sleep = sleep

    def wait(
        self,
        job: ImportJob,
        timeout_seconds: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
        backoff: Optional[Backoff] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImageStatus:
        """
        Wait for an import job to finish.

        Args:
            job: The job to poll; its status fields are updated in place
            timeout_seconds: Overall deadline
            backoff: Interval schedule between status checks
            cancel_event: Event that stops polling when set

        Returns:
            ImageStatus: The observation that reported the image available

        Raises:
            ImageUnavailableError: If EC2 reports the import failed
            ImportTimeoutError: If the job is still pending at the deadline
            PipelineCancelledError: If ``cancel_event`` is set
        """

        def check_import_status() -> Dict:
            try:
                task = self.client.describe_import_task(job.job_id)
            except (BotoCoreError, ClientError, LookupError) as e:
                log_message(LogLevel.WARN, f"Status check for import task {job.job_id} failed (retrying): {e}")
                return {"completed": False, "description": f"Status check failed for import task {job.job_id}"}

            status = import_task_status(task)
            job.status = status.state
            job.status_message = status.message
            job.last_checked = self.clock()

            if status.state == ImageState.AVAILABLE:
                return {"completed": True, "result": status, "progress": 100}

            if status.state == ImageState.UNAVAILABLE:
                raise ImageUnavailableError(
                    Stage.POLL, f"Unavailable importing image: {status.message}", import_task_id=job.job_id
                )

            return {
                "completed": False,
                "progress": status.progress,
                "description": f"Waiting for import task {job.job_id} (Status: {status.message})",
            }

        try:
            return wait_with_backoff(
                description=f"Waiting for import task {job.job_id}",
                check_function=check_import_status,
                timeout_seconds=timeout_seconds,
                backoff=backoff,
                cancel_event=cancel_event,
                clock=self.clock,
                sleep=self.sleep,
            )
        except RetryTimeout as e:
            raise ImportTimeoutError(
                Stage.POLL,
                f"Import still pending after {timeout_seconds:g} seconds ({e.attempts} status checks)",
                import_task_id=job.job_id,
            ) from e
        except RetryCancelled as e:
            raise PipelineCancelledError(
                Stage.POLL,
                f"Cancelled while waiting for import ({e.attempts} status checks)",
                import_task_id=job.job_id,
            ) from e
