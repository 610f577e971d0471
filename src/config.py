"""Configuration and logging setup for the known-good versions registry."""

import logging
import os
import sys


def setup_logging(level: str | None = None) -> None:
    """Set up logging to stdout.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL or INFO.
    """
    log_level = level or os.getenv(ENV_LOG_LEVEL, "INFO")

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Set boto3 logging to WARNING to reduce noise
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)


def get_env_var(name: str, default: str | None = None, required: bool = False) -> str:
    """Get environment variable with optional default and validation.

    Args:
        name: Environment variable name
        default: Default value if not set
        required: Whether the variable is required

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set
    """
    value = os.getenv(name, default)

    if required and not value:
        raise ValueError(f"Required environment variable {name} is not set")

    return value or ""


# Environment variable names
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_STORAGE_BACKEND = "STORAGE_BACKEND"
ENV_DATA_DIR = "DATA_DIR"
ENV_DIST_DIR = "DIST_DIR"
ENV_S3_BUCKET = "S3_BUCKET_NAME"
ENV_S3_DATA_PREFIX = "S3_DATA_PREFIX"
ENV_S3_DIST_PREFIX = "S3_DIST_PREFIX"
ENV_AWS_REGION = "AWS_REGION"
ENV_DOWNLOADS_CONFIG = "DOWNLOADS_CONFIG"
ENV_PUBLISH_MAX_WORKERS = "PUBLISH_MAX_WORKERS"

STORAGE_LOCAL = "local"
STORAGE_S3 = "s3"
