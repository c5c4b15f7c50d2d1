#!/usr/bin/python3
"""Artifact import tool for AWS EC2."""

import json
import signal
import threading
from typing import NoReturn, Optional

import typer
from rich.rule import Rule
from typing_extensions import Annotated

from artifact_import.common import (
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    ERR_ARTIFACT_NOT_FOUND,
    ERR_GENERAL_OPERATION_FAILED,
    ERR_INPUT_INVALID,
    ERR_OPERATION_CANCELLED,
    STAGE_ERROR_CODES,
    DeleteError,
    ImageFormat,
    ImportConfig,
    PipelineCancelledError,
    PipelineError,
    UploadError,
)
from artifact_import.core import ImportPipeline, summary_items
from artifact_import.utils import (
    display_summary,
    error_and_exit,
    locate_artifact,
    render_object_key,
    setup_logging,
    validate_config,
    validate_license_type,
    validate_source,
)

app = typer.Typer(name="artifact-import", help="Import locally built disk images into AWS EC2", add_completion=False)


def _install_cancel_handler(cancel_event: threading.Event) -> None:
    """Turn SIGTERM and Ctrl+C into a cancellation of the running pipeline."""

    def handle_cancel(signum, frame) -> None:
        cancel_event.set()

    signal.signal(signal.SIGTERM, handle_cancel)
    signal.signal(signal.SIGINT, handle_cancel)


def _report_pipeline_error(error: PipelineError) -> NoReturn:
    parts = [f"{error.stage.value.capitalize()} stage failed", Rule(), str(error)]

    if isinstance(error, UploadError) and error.details:
        parts.extend([Rule(), json.dumps(error.details, indent=2, default=str)])

    if isinstance(error, PipelineCancelledError):
        error_and_exit(*parts, code=ERR_OPERATION_CANCELLED)

    error_and_exit(*parts, code=STAGE_ERROR_CODES[error.stage])


@app.command("import")
def import_artifact(
    region: Annotated[str, typer.Option("--region", "-r", help="AWS region (e.g., us-west-2)")],
    bucket: Annotated[str, typer.Option("--s3-bucket", "-b", help="Existing S3 bucket the image is uploaded to")],
    source: Annotated[
        str,
        typer.Option(
            "--source",
            "-s",
            help="Disk image file, or a build output directory containing one",
            callback=validate_source,
        ),
    ],
    image_name: Annotated[str, typer.Option("--image-name", help="Name of the imported image")],
    os_type: Annotated[
        str, typer.Option("--os-type", help="OS type: CentOS, Ubuntu, Windows, RedHat, Debian or Other")
    ],
    os_name: Annotated[str, typer.Option("--os-name", help="OS name, e.g. 'CentOS 7.2 64-bit'")],
    image_format: Annotated[ImageFormat, typer.Option("--format", "-f", help="Format of the disk image")],
    image_description: Annotated[str, typer.Option("--image-description", help="Description of the image")] = "",
    object_key: Annotated[
        Optional[str],
        typer.Option(
            "--object-key",
            help="S3 object key for the upload; '{timestamp}' is replaced by the Unix time. "
            "Defaults to artifact-import-{timestamp}.<format>",
        ),
    ] = None,
    skip_clean: Annotated[
        bool, typer.Option("--skip-clean", help="Keep the uploaded object in S3 after the import")
    ] = False,
    timeout: Annotated[
        int, typer.Option("--timeout", help="Seconds to wait for the import to finish")
    ] = DEFAULT_WAIT_TIMEOUT_SECONDS,
    license_type: Annotated[
        Optional[str],
        typer.Option("--license-type", help="License type for the AMI (AWS or BYOL)", callback=validate_license_type),
    ] = None,
    log_level: Annotated[str, typer.Option("--log-level", help="Console log level")] = "INFO",
) -> None:
    """
    Import a disk image to AWS EC2 as an AMI.

    The image is uploaded to the S3 bucket, imported with EC2 VM Import and the
    uploaded object is deleted once the AMI is available (unless --skip-clean).
    The vmimport service role must already allow access to the bucket.

    Examples:

    \b
    # Import a RAW image
    python -m artifact_import --region us-west-2 --s3-bucket my-bucket --source ./output/disk.raw \\
        --image-name centos-base --os-type CentOS --os-name "CentOS 7.9 64-bit" --format raw

    \b
    # Import the VMDK from a build directory and keep the uploaded object
    python -m artifact_import -r us-west-2 -b my-bucket -s ./output --format vmdk --skip-clean \\
        --image-name ubuntu-base --os-type Ubuntu --os-name "Ubuntu 22.04"
    """
    setup_logging(log_level)

    config = ImportConfig(
        region=region,
        bucket=bucket,
        image_name=image_name,
        os_type=os_type,
        os_name=os_name,
        image_format=image_format.value,
        object_key=render_object_key(object_key, image_format),
        image_description=image_description,
        skip_clean=skip_clean,
        wait_timeout=timeout,
        license_type=license_type,
    )

    errors = validate_config(config)
    if errors:
        error_and_exit("Invalid configuration", Rule(), *errors, code=ERR_INPUT_INVALID)

    try:
        artifact = locate_artifact(source, config.format)
    except FileNotFoundError as e:
        error_and_exit("Artifact not found", Rule(), str(e), code=ERR_ARTIFACT_NOT_FOUND)

    cancel_event = threading.Event()
    _install_cancel_handler(cancel_event)

    pipeline = ImportPipeline(config, cancel_event=cancel_event)
    try:
        result = pipeline.run(artifact)
    except DeleteError as e:
        if e.result is not None:
            display_summary("Artifact Import Results", summary_items(e.result))
        _report_pipeline_error(e)
    except PipelineError as e:
        _report_pipeline_error(e)
    except Exception as e:
        error_and_exit(
            "Import operation failed",
            Rule(),
            str(e),
            code=ERR_GENERAL_OPERATION_FAILED,
        )

    pipeline.display_results(result)


if __name__ == "__main__":
    app()
