"""Core import pipeline modules."""

from .bucket_resolver import BucketResolver
from .cleanup import Cleanup
from .import_requester import ImportRequester, build_import_request, to_provider_format
from .pipeline import ImportPipeline, summary_items
from .uploader import Uploader

__all__ = [
    "BucketResolver",
    "Cleanup",
    "ImportPipeline",
    "ImportRequester",
    "Uploader",
    "build_import_request",
    "summary_items",
    "to_provider_format",
]
