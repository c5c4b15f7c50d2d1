"""Tests for ReadinessPoller and EC2 status mapping."""

import threading

import pytest
from botocore.exceptions import EndpointConnectionError

from artifact_import.aws import ReadinessPoller, import_task_status
from artifact_import.common import (
    ImageState,
    ImageUnavailableError,
    ImportJob,
    ImportTimeoutError,
    PipelineCancelledError,
    Stage,
)
from tests.conftest import FakeCloudClient, client_error


@pytest.mark.parametrize(
    "status, expected",
    [
        ("completed", ImageState.AVAILABLE),
        ("deleted", ImageState.UNAVAILABLE),
        ("deleting", ImageState.UNAVAILABLE),
        ("active", ImageState.PENDING),
        ("something-new", ImageState.UNKNOWN),
    ],
)
def test_import_task_status_mapping(status, expected):
    assert import_task_status({"Status": status}).state == expected


def test_import_task_status_fields():
    status = import_task_status({"Status": "active", "StatusMessage": "converting", "Progress": "27"})

    assert status.message == "converting"
    assert status.progress == 27
    assert status.image_id is None


def test_import_task_status_unknown_progress():
    assert import_task_status({"Status": "active", "Progress": "unknown"}).progress == 0


def make_poller(client, clock):
    return ReadinessPoller(client, clock=clock, sleep=clock.sleep)


class TestReadinessPoller:
    def test_available_returns_status(self, fake_clock):
        client = FakeCloudClient(statuses=["active", "active", "completed"], image_id="ami-0aaa1111bbbb2222c")
        job = ImportJob(job_id="uimage-1")

        status = make_poller(client, fake_clock).wait(job)

        assert status.state == ImageState.AVAILABLE
        assert status.image_id == "ami-0aaa1111bbbb2222c"
        assert job.job_id == "uimage-1"
        assert job.status == ImageState.AVAILABLE
        assert job.last_checked == 6
        assert client.status_checks == 3
        assert fake_clock.sleeps == [2, 4]

    def test_unavailable_fails_without_further_polling(self, fake_clock):
        client = FakeCloudClient(task_id="uimage-2", statuses=["active", "deleted", "completed"])
        job = ImportJob(job_id="uimage-2")

        with pytest.raises(ImageUnavailableError) as exc_info:
            make_poller(client, fake_clock).wait(job)

        assert exc_info.value.stage == Stage.POLL
        assert exc_info.value.import_task_id == "uimage-2"
        assert "Unsupported kernel version" in str(exc_info.value)
        assert client.status_checks == 2
        assert job.status == ImageState.UNAVAILABLE

    def test_timeout_is_distinct_from_unavailable(self, fake_clock):
        client = FakeCloudClient(statuses=["active"])
        job = ImportJob(job_id="uimage-3")

        with pytest.raises(ImportTimeoutError) as exc_info:
            make_poller(client, fake_clock).wait(job, timeout_seconds=6)

        assert not isinstance(exc_info.value, ImageUnavailableError)
        assert exc_info.value.import_task_id == "uimage-3"
        assert client.status_checks == 2
        assert job.status == ImageState.PENDING

    def test_unknown_status_keeps_polling(self, fake_clock):
        client = FakeCloudClient(statuses=["validating", "completed"])

        status = make_poller(client, fake_clock).wait(ImportJob(job_id="uimage-4"))

        assert status.state == ImageState.AVAILABLE
        assert client.status_checks == 2

    def test_transport_errors_are_transient(self, fake_clock):
        client = FakeCloudClient(
            statuses=[
                client_error("RequestLimitExceeded", "DescribeImportImageTasks"),
                EndpointConnectionError(endpoint_url="https://ec2.us-west-2.amazonaws.com"),
                "completed",
            ]
        )
        job = ImportJob(job_id="uimage-5")

        status = make_poller(client, fake_clock).wait(job)

        assert status.state == ImageState.AVAILABLE
        assert client.status_checks == 3

    def test_transport_errors_still_bounded_by_deadline(self, fake_clock):
        client = FakeCloudClient(statuses=[client_error("InternalError", "DescribeImportImageTasks", 500)])

        with pytest.raises(ImportTimeoutError):
            make_poller(client, fake_clock).wait(ImportJob(job_id="uimage-6"), timeout_seconds=30)

        assert fake_clock.now == 30

    def test_cancellation_stops_within_one_interval(self, fake_clock):
        client = FakeCloudClient(statuses=["active"])
        event = threading.Event()

        def cancel_during_third_wait(clock):
            if len(clock.sleeps) == 3:
                event.set()
            return event.is_set()

        fake_clock.on_sleep = cancel_during_third_wait

        with pytest.raises(PipelineCancelledError) as exc_info:
            make_poller(client, fake_clock).wait(ImportJob(job_id="uimage-7"), cancel_event=event)

        assert not isinstance(exc_info.value, ImportTimeoutError)
        assert exc_info.value.import_task_id == "uimage-7"
        assert client.status_checks == 3
        assert len(fake_clock.sleeps) == 3
