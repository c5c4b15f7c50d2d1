"""End-to-end tests for ImportPipeline with a fake AWS client."""

import pytest

from artifact_import.common import (
    ArtifactRef,
    BucketNotFoundError,
    DeleteError,
    ImageFormat,
    ImageUnavailableError,
    ImportRequestError,
    ImportTimeoutError,
    PipelineCancelledError,
    Stage,
    UnsupportedFormatError,
)
from artifact_import.core import Cleanup, summary_items
from tests.conftest import FakeCloudClient, client_error

KEY = "artifact-import-1700000000.raw"


class TestScenarios:
    def test_public_bucket_import_succeeds_and_cleans_up(self, make_pipeline, artifact):
        client = FakeCloudClient(public=True, task_id="uimage-1", statuses=["active", "active", "completed"])

        result = make_pipeline(client).run(artifact)

        assert result.import_task_id == "uimage-1"
        assert result.image_id == "ami-0123456789abcdef0"
        assert result.region == "us-west-2"
        assert result.client is client
        assert result.cleaned_up is True
        assert client.deleted == [("build-artifacts", KEY)]
        assert client.objects == {}
        assert client.import_requests[0]["DiskContainers"][0]["Url"] == (
            f"https://build-artifacts.s3.us-west-2.amazonaws.com/{KEY}"
        )

    def test_skip_clean_keeps_object(self, make_pipeline, artifact):
        client = FakeCloudClient(public=True, statuses=["active", "completed"])

        result = make_pipeline(client, skip_clean=True).run(artifact)

        assert result.cleaned_up is False
        assert client.deleted == []
        assert ("build-artifacts", KEY) in client.objects

    def test_missing_bucket_fails_upload_stage(self, make_pipeline, artifact):
        client = FakeCloudClient(bucket_exists=False)

        with pytest.raises(BucketNotFoundError) as exc_info:
            make_pipeline(client).run(artifact)

        assert exc_info.value.stage == Stage.UPLOAD
        assert exc_info.value.import_task_id is None
        assert client.import_requests == []
        assert client.status_checks == 0

    def test_unavailable_import_reports_task_id(self, make_pipeline, artifact):
        client = FakeCloudClient(task_id="uimage-2", statuses=["active", "deleted"])

        with pytest.raises(ImageUnavailableError) as exc_info:
            make_pipeline(client).run(artifact)

        assert exc_info.value.stage == Stage.POLL
        assert exc_info.value.import_task_id == "uimage-2"
        assert "uimage-2" in str(exc_info.value)
        assert client.deleted == []

    def test_pending_past_deadline_times_out_after_two_checks(self, make_pipeline, artifact, fake_clock):
        client = FakeCloudClient(task_id="uimage-3", statuses=["active"])

        with pytest.raises(ImportTimeoutError) as exc_info:
            make_pipeline(client, wait_timeout=6).run(artifact)

        assert exc_info.value.import_task_id == "uimage-3"
        assert client.status_checks == 2
        assert fake_clock.sleeps == [2, 4]
        assert client.deleted == []


class TestFailures:
    def test_import_rejection_is_not_retried(self, make_pipeline, artifact):
        client = FakeCloudClient()
        client.import_error = client_error("ResourceCountExceeded", "ImportImage")

        with pytest.raises(ImportRequestError):
            make_pipeline(client).run(artifact)

        assert len(client.import_requests) == 1
        assert client.status_checks == 0

    def test_unsupported_format_fails_before_upload(self, make_pipeline, tmp_path):
        path = tmp_path / "disk.qcow2"
        path.write_bytes(b"QFI\xfb")
        client = FakeCloudClient()

        with pytest.raises(UnsupportedFormatError):
            make_pipeline(client, image_format="qcow2").run(ArtifactRef(path=path, format=ImageFormat.QCOW2))

        assert client.objects == {}
        assert client.bucket_lookups == 0

    def test_cleanup_failure_still_returns_image(self, make_pipeline, artifact):
        client = FakeCloudClient(task_id="uimage-4", statuses=["completed"])
        client.delete_error = client_error("AccessDenied", "DeleteObject", 403)

        with pytest.raises(DeleteError) as exc_info:
            make_pipeline(client).run(artifact)

        error = exc_info.value
        assert error.stage == Stage.CLEANUP
        assert error.import_task_id == "uimage-4"
        assert error.result.image_id == "ami-0123456789abcdef0"
        assert error.result.cleaned_up is False

    def test_cancel_after_upload_skips_import(self, make_pipeline, artifact):
        client = FakeCloudClient()
        pipeline = make_pipeline(client)
        pipeline.cancel_event.set()

        with pytest.raises(PipelineCancelledError) as exc_info:
            pipeline.run(artifact)

        assert exc_info.value.stage == Stage.IMPORT
        assert client.import_requests == []

    def test_cancel_while_polling(self, make_pipeline, artifact, fake_clock):
        client = FakeCloudClient(task_id="uimage-5", statuses=["active"])
        pipeline = make_pipeline(client)

        def cancel(clock):
            pipeline.cancel_event.set()
            return True

        fake_clock.on_sleep = cancel

        with pytest.raises(PipelineCancelledError) as exc_info:
            pipeline.run(artifact)

        assert exc_info.value.stage == Stage.POLL
        assert exc_info.value.import_task_id == "uimage-5"
        assert client.status_checks == 1

    def test_interrupt_while_polling_is_cancellation(self, make_pipeline, artifact, fake_clock):
        client = FakeCloudClient(task_id="uimage-6", statuses=["active"])
        pipeline = make_pipeline(client)

        def interrupt(clock):
            raise KeyboardInterrupt

        fake_clock.on_sleep = interrupt

        with pytest.raises(PipelineCancelledError) as exc_info:
            pipeline.run(artifact)

        assert exc_info.value.stage == Stage.POLL
        assert exc_info.value.import_task_id == "uimage-6"
        assert "uimage-6" in str(exc_info.value)
        assert client.deleted == []


def test_cleanup_deletes_object(fake_client):
    fake_client.objects[("images", "disk.raw")] = 1

    Cleanup(fake_client).delete("images", "disk.raw")

    assert fake_client.objects == {}


def test_summary_items(make_pipeline, artifact):
    client = FakeCloudClient(statuses=["completed"])
    result = make_pipeline(client).run(artifact)

    items = summary_items(result)

    assert items["Image ID"] == "ami-0123456789abcdef0"
    assert items["S3 Object"] == f"build-artifacts/{KEY}"
    assert items["S3 Object Removed"] == "yes"
