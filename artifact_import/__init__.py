"""Artifact import tool for AWS EC2.

Uploads a locally built disk image to S3, imports it as an AMI through EC2 VM
Import, waits for the import to finish and removes the uploaded object.
"""

# AWS integration
from .aws import AWSClient, ReadinessPoller

# Core functionality
from .core import ImportPipeline

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "ImportPipeline",
    # AWS classes
    "AWSClient",
    "ReadinessPoller",
]
