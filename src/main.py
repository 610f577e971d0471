"""Main entry point for the known-good versions registry update."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.config import (
    ENV_AWS_REGION,
    ENV_DATA_DIR,
    ENV_DIST_DIR,
    ENV_DOWNLOADS_CONFIG,
    ENV_PUBLISH_MAX_WORKERS,
    ENV_S3_BUCKET,
    ENV_S3_DATA_PREFIX,
    ENV_S3_DIST_PREFIX,
    ENV_STORAGE_BACKEND,
    STORAGE_LOCAL,
    STORAGE_S3,
    get_env_var,
    setup_logging,
)
from src.config_manager import ConfigManager, DownloadsConfig
from src.document_store import DocumentStore, LocalDocumentStore, S3DocumentStore
from src.models import ChannelSnapshot, FlatCatalog, KnownGoodRegistry, MilestoneRegistry
from src.publisher import ManifestPublisher, PublishReport
from src.version_manager import VersionManager

logger = logging.getLogger(__name__)

DASHBOARD = "dashboard.json"
LAST_KNOWN_GOOD_VERSIONS = "last-known-good-versions.json"
KNOWN_GOOD_VERSIONS = "known-good-versions.json"
LATEST_VERSIONS_PER_MILESTONE = "latest-versions-per-milestone.json"
LATEST_PATCH_VERSIONS_PER_BUILD = "latest-patch-versions-per-build.json"


@dataclass
class RunSummary:
    """What a run changed and published."""

    last_known_good_changed: bool
    milestones_changed: bool
    catalog_changed: bool
    versions_in_catalog: int
    per_version: PublishReport = field(default_factory=PublishReport)

    def to_dict(self) -> dict[str, Any]:
        return {
            "last_known_good_changed": self.last_known_good_changed,
            "milestones_changed": self.milestones_changed,
            "catalog_changed": self.catalog_changed,
            "versions_in_catalog": self.versions_in_catalog,
            "per_version_written": len(self.per_version.written),
            "per_version_failed": sorted(self.per_version.failed),
        }


def run(
    data_store: DocumentStore,
    dist_store: DocumentStore,
    downloads_config: DownloadsConfig | None = None,
    clock: Callable[[], str] | None = None,
    max_workers: int = 8,
) -> RunSummary:
    """Update every registry from the dashboard snapshot and publish them.

    All input documents are loaded before anything is written, so a missing or
    corrupt document aborts the run without touching any output.

    Args:
        data_store: Store holding the dashboard snapshot and the registries
        dist_store: Store receiving one manifest per catalog version
        downloads_config: Download configuration, defaults to the built-in one
        clock: Timestamp source for changed registries
        max_workers: Number of concurrent per-version writes

    Returns:
        RunSummary of the run

    Raises:
        LoadFailure: If an input document is missing or malformed
        MalformedVersionError: If any version string is malformed
        WriteFailure: If a registry cannot be written
    """
    snapshot = ChannelSnapshot.from_dict(data_store.read_document(DASHBOARD))
    last_known_good = KnownGoodRegistry.from_dict(
        data_store.read_document(LAST_KNOWN_GOOD_VERSIONS)
    )
    milestones = MilestoneRegistry.from_dict(
        data_store.read_document(LATEST_VERSIONS_PER_MILESTONE)
    )
    catalog = FlatCatalog.from_dict(data_store.read_document(KNOWN_GOOD_VERSIONS))
    logger.info(
        f"Loaded snapshot with {len(snapshot.channels)} channels and "
        f"catalog with {len(catalog.versions)} versions"
    )

    manager = VersionManager(clock=clock)
    publisher = ManifestPublisher(
        data_store, dist_store, config=downloads_config, max_workers=max_workers
    )

    last_known_good_result = manager.reconcile_last_known_good(snapshot, last_known_good)
    last_known_good = last_known_good_result.document
    publisher.publish_registry(
        LAST_KNOWN_GOOD_VERSIONS, last_known_good.to_dict(), "channels"
    )

    milestones_result = manager.update_latest_versions_per_milestone(
        last_known_good, milestones
    )
    publisher.publish_registry(
        LATEST_VERSIONS_PER_MILESTONE,
        milestones_result.document.to_dict(),
        "milestones",
    )

    catalog_result = manager.merge_known_good_versions(last_known_good, catalog)
    catalog = catalog_result.document
    catalog_document = catalog.to_dict()
    publisher.publish_registry(KNOWN_GOOD_VERSIONS, catalog_document, "versions")

    builds = manager.prepare_latest_patch_versions_per_build(catalog)
    publisher.publish_registry(
        LATEST_PATCH_VERSIONS_PER_BUILD, builds.to_dict(), "builds"
    )

    report = publisher.publish_per_version_manifests(catalog_document)

    return RunSummary(
        last_known_good_changed=last_known_good_result.changed,
        milestones_changed=milestones_result.changed,
        catalog_changed=catalog_result.changed,
        versions_in_catalog=len(catalog.versions),
        per_version=report,
    )


def create_stores() -> tuple[DocumentStore, DocumentStore]:
    """Create the data and dist stores configured by environment variables.

    Raises:
        ValueError: If the storage backend is unknown or S3 has no bucket
    """
    backend = get_env_var(ENV_STORAGE_BACKEND, STORAGE_LOCAL).lower()

    if backend == STORAGE_LOCAL:
        return (
            LocalDocumentStore(get_env_var(ENV_DATA_DIR, "data")),
            LocalDocumentStore(get_env_var(ENV_DIST_DIR, "dist")),
        )

    if backend == STORAGE_S3:
        bucket = get_env_var(ENV_S3_BUCKET, required=True)
        region = get_env_var(ENV_AWS_REGION, "us-east-1")
        data_store = S3DocumentStore(
            bucket, prefix=get_env_var(ENV_S3_DATA_PREFIX, "data/"), region=region
        )
        dist_store = S3DocumentStore(
            bucket,
            prefix=get_env_var(ENV_S3_DIST_PREFIX, "dist/"),
            region=region,
            s3_client=data_store.s3_client,
        )
        return data_store, dist_store

    raise ValueError(f"Unknown storage backend: {backend}")


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda handler function.

    Args:
        event: Lambda event data
        context: Lambda context object

    Returns:
        Response dictionary with status and message
    """
    setup_logging()
    logger.info(
        f"Starting registry update (request: {getattr(context, 'aws_request_id', 'unknown')})"
    )

    try:
        data_store, dist_store = create_stores()
        downloads_config = ConfigManager(get_env_var(ENV_DOWNLOADS_CONFIG)).load()
        max_workers = int(get_env_var(ENV_PUBLISH_MAX_WORKERS, "8"))

        summary = run(
            data_store, dist_store, downloads_config, max_workers=max_workers
        )

        if not summary.per_version.success:
            logger.error(
                f"{len(summary.per_version.failed)} per-version manifests failed to write"
            )
            return {"statusCode": 500, "body": summary.to_dict()}

        logger.info("Registry update completed")
        return {"statusCode": 200, "body": summary.to_dict()}

    except Exception as e:
        logger.error(f"Registry update failed: {type(e).__name__}: {e}")
        return {"statusCode": 500, "body": f"Error updating registries: {str(e)}"}


def main() -> int:
    """Local development entry point."""

    class MockContext:
        aws_request_id = "local-run"
        function_name = "known-good-versions-local"
        function_version = "$LATEST"

    result = lambda_handler({}, MockContext())
    logger.info(f"Result: {result}")
    return 0 if result["statusCode"] == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())
