"""AWS integration modules for artifact_import."""

from .aws_client import AWSClient
from .aws_waiter import ReadinessPoller, import_task_status

__all__ = ["AWSClient", "ReadinessPoller", "import_task_status"]
