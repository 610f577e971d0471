"""JSON document storage on the local filesystem or in S3."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.exceptions import LoadFailure, WriteFailure

logger = logging.getLogger(__name__)


def serialize_document(value: Any) -> str:
    """Serialize a document the way the published JSON files are formatted."""
    return json.dumps(value, indent="\t", ensure_ascii=False) + "\n"


class DocumentStore(ABC):
    """Base class for JSON document stores.

    Documents are addressed by name relative to the store's root,
    e.g. "known-good-versions.json".
    """

    @abstractmethod
    def read_document(self, name: str) -> Any:
        """Load and parse a document.

        Raises:
            LoadFailure: If the document is missing or is not valid JSON
        """

    @abstractmethod
    def write_document(self, name: str, value: Any) -> None:
        """Serialize and store a document, replacing any previous content.

        Raises:
            WriteFailure: If the document cannot be stored
        """


class LocalDocumentStore(DocumentStore):
    """Stores documents as files under a base directory."""

    def __init__(self, base_dir: str | Path):
        """Initialize the store.

        Args:
            base_dir: Directory documents are read from and written to
        """
        self.base_dir = Path(base_dir)
        logger.info(f"Initialized LocalDocumentStore at: {self.base_dir}")

    def read_document(self, name: str) -> Any:
        path = self.base_dir / name
        logger.debug(f"Reading {path}")
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            logger.error(f"Document not found: {path}")
            raise LoadFailure(name, "not found") from e
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {path}: {e}")
            raise LoadFailure(name, f"invalid JSON: {e}") from e
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise LoadFailure(name, str(e)) from e

    def write_document(self, name: str, value: Any) -> None:
        path = self.base_dir / name
        logger.debug(f"Writing {path}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(serialize_document(value), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise WriteFailure(name, str(e)) from e


class S3DocumentStore(DocumentStore):
    """Stores documents as objects in an S3 bucket."""

    def __init__(
        self,
        bucket_name: str,
        prefix: str = "",
        region: str = "us-east-1",
        s3_client: Any | None = None,
    ):
        """Initialize the store.

        Args:
            bucket_name: S3 bucket name
            prefix: Key prefix prepended to document names (e.g., "data/")
            region: AWS region
            s3_client: Preconfigured S3 client. If None, one is created.
        """
        self.bucket_name = bucket_name
        self.prefix = prefix
        self.region = region
        self.s3_client = s3_client or boto3.client("s3", region_name=self.region)

        logger.info(
            f"Initialized S3DocumentStore for s3://{self.bucket_name}/{self.prefix}"
        )

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def read_document(self, name: str) -> Any:
        key = self._key(name)
        logger.debug(f"Reading s3://{self.bucket_name}/{key}")
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            body = response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"Failed to read s3://{self.bucket_name}/{key}: {error_code}")
            if error_code in ("NoSuchKey", "404"):
                raise LoadFailure(name, "not found") from e
            raise LoadFailure(name, error_code) from e
        except BotoCoreError as e:
            logger.error(f"Failed to read s3://{self.bucket_name}/{key}: {e}")
            raise LoadFailure(name, str(e)) from e

        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse s3://{self.bucket_name}/{key}: {e}")
            raise LoadFailure(name, f"invalid JSON: {e}") from e

    def write_document(self, name: str, value: Any) -> None:
        key = self._key(name)
        logger.debug(f"Writing s3://{self.bucket_name}/{key}")
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=serialize_document(value).encode("utf-8"),
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to write s3://{self.bucket_name}/{key}: {e}")
            raise WriteFailure(name, str(e)) from e
