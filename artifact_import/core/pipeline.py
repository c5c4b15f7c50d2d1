"""Core artifact import orchestrator."""

import threading
from typing import Dict, Optional

from rich.markup import escape

from artifact_import.aws import AWSClient, ReadinessPoller
from artifact_import.common import (
    ArtifactRef,
    DeleteError,
    ImportConfig,
    ImportResult,
    LogLevel,
    PipelineCancelledError,
    PipelineError,
    Stage,
)
from artifact_import.core.bucket_resolver import BucketResolver
from artifact_import.core.cleanup import Cleanup
from artifact_import.core.import_requester import ImportRequester, to_provider_format
from artifact_import.core.uploader import Uploader
from artifact_import.utils import Backoff, display_summary, log_message, log_section, log_step


class ImportPipeline:
    """
    Upload, import, wait, clean up.

    Stages run strictly in order and the first failure stops the run. Once EC2
    assigns an import task id, every later error carries it. A cleanup failure
    raises ``DeleteError`` holding the finished ``ImportResult``.
    """

    TOTAL_STEPS = 4

    def __init__(
        self,
        config: ImportConfig,
        client: Optional[AWSClient] = None,
        cancel_event: Optional[threading.Event] = None,
        poller: Optional[ReadinessPoller] = None,
        backoff: Optional[Backoff] = None,
    ):
        """Initialize the pipeline components around one AWS client."""
        self.config = config
        self.aws_client = client or AWSClient(config.region)
        self.cancel_event = cancel_event or threading.Event()
        self.backoff = backoff

        self.resolver = BucketResolver(self.aws_client)
        self.uploader = Uploader(self.aws_client, self.resolver)
        self.requester = ImportRequester(self.aws_client)
        self.poller = poller or ReadinessPoller(self.aws_client)
        self.cleanup = Cleanup(self.aws_client)

    def run(self, artifact: ArtifactRef) -> ImportResult:
        """Import ``artifact`` and return the registered image."""
        log_section("Artifact Import", section_level=1)
        log_message(LogLevel.DEBUG, f"Configuration: {escape(self.config.describe())}")

        bucket = self.config.bucket
        object_key = self.config.object_key
        metadata = self.config.image_metadata()

        # Fail before spending time on the transfer
        to_provider_format(metadata.format)

        log_step(1, self.TOTAL_STEPS, f"Upload {artifact.path.name} to S3: {bucket}/{object_key}")
        upload_result = self.uploader.upload(artifact.path, bucket, object_key)

        if self.cancel_event.is_set():
            raise PipelineCancelledError(Stage.IMPORT, "Cancelled before the import request was submitted")

        log_step(2, self.TOTAL_STEPS, f"Import image from S3: {bucket}/{object_key}")
        job = self.requester.request_import(upload_result.url, metadata)

        log_step(3, self.TOTAL_STEPS, f"Wait for import task {job.job_id}")
        try:
            status = self.poller.wait(
                job,
                timeout_seconds=self.config.wait_timeout,
                backoff=self.backoff,
                cancel_event=self.cancel_event,
            )
        except PipelineError as e:
            e.import_task_id = e.import_task_id or job.job_id
            raise
        except KeyboardInterrupt as e:
            raise PipelineCancelledError(
                Stage.POLL, "Interrupted while waiting for import", import_task_id=job.job_id
            ) from e

        result = ImportResult(
            image_id=status.image_id or job.job_id,
            import_task_id=job.job_id,
            region=self.config.region,
            bucket=bucket,
            object_key=object_key,
            client=self.aws_client,
        )
        log_message(
            LogLevel.SUCCESS, f"Importing created image {result.image_id!r} in region {result.region!r} complete"
        )

        if self.config.skip_clean:
            log_message(LogLevel.INFO, f"Skipping cleanup, S3 object kept: {bucket}/{object_key}")
            return result

        log_step(4, self.TOTAL_STEPS, f"Delete import source S3 object: {bucket}/{object_key}")
        try:
            self.cleanup.delete(bucket, object_key)
        except DeleteError as e:
            e.result = result
            e.import_task_id = job.job_id
            raise

        result.cleaned_up = True
        return result

    def display_results(self, result: ImportResult) -> None:
        """Display operation results."""
        log_section("Operation Summary", section_level=1)
        log_message(
            LogLevel.SUCCESS,
            "Operation completed successfully!",
        )
        display_summary("Artifact Import Results", summary_items(result))


def summary_items(result: ImportResult) -> Dict[str, str]:
    """Key facts about an import, for summary panels."""
    return {
        "Image ID": result.image_id,
        "Import Task": result.import_task_id,
        "Region": result.region,
        "S3 Object": f"{result.bucket}/{result.object_key}",
        "S3 Object Removed": "yes" if result.cleaned_up else "no",
    }
