"""Publishing of registry documents and their download manifests."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from src.config_manager import DownloadsConfig
from src.document_store import DocumentStore
from src.downloads import add_downloads
from src.exceptions import WriteFailure

logger = logging.getLogger(__name__)

WITH_DOWNLOADS_SUFFIX = "-with-downloads"


def with_downloads_name(name: str) -> str:
    """Name of the sibling manifest, e.g. "a.json" -> "a-with-downloads.json"."""
    stem, dot, extension = name.rpartition(".")
    if not dot:
        return f"{name}{WITH_DOWNLOADS_SUFFIX}"
    return f"{stem}{WITH_DOWNLOADS_SUFFIX}.{extension}"


@dataclass
class PublishReport:
    """Outcome of writing the per-version manifests."""

    written: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed


class ManifestPublisher:
    """Writes registries, their download manifests and per-version manifests."""

    def __init__(
        self,
        data_store: DocumentStore,
        dist_store: DocumentStore,
        config: DownloadsConfig | None = None,
        max_workers: int = 8,
    ):
        """Initialize ManifestPublisher.

        Args:
            data_store: Store receiving the registries and their manifests
            dist_store: Store receiving one manifest per catalog version
            config: Download configuration used to expand manifests
            max_workers: Number of concurrent per-version writes
        """
        self.data_store = data_store
        self.dist_store = dist_store
        self.config = config or DownloadsConfig()
        self.max_workers = max_workers

    def publish_registry(self, name: str, document: dict[str, Any], key: str) -> None:
        """Write a registry and its "-with-downloads" sibling.

        The manifest is built before anything is written.

        Args:
            name: Document name, e.g. "known-good-versions.json"
            document: Registry document
            key: Name of the record collection inside the document

        Raises:
            MalformedVersionError: If a record holds a malformed version
            WriteFailure: If either write fails
        """
        manifest = add_downloads(document, key, self.config)
        self.data_store.write_document(name, document)
        self.data_store.write_document(with_downloads_name(name), manifest)
        logger.info(f"Published {name}")

    def publish_per_version_manifests(self, catalog: dict[str, Any]) -> PublishReport:
        """Write one manifest per catalog version, named after the version.

        Writes run concurrently. A failed write is logged and reported without
        affecting the others.

        Args:
            catalog: Flat catalog document

        Returns:
            PublishReport listing written and failed documents
        """
        releases = add_downloads(catalog, "versions", self.config)["versions"]
        report = PublishReport()
        logger.info(f"Writing {len(releases)} per-version manifests")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(
                    self.dist_store.write_document, f"{release['version']}.json", release
                ): f"{release['version']}.json"
                for release in releases
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    future.result()
                    report.written.append(name)
                except WriteFailure as e:
                    logger.error(f"Failed to write per-version manifest {name}: {e}")
                    report.failed[name] = e.reason
                except Exception as e:
                    logger.error(
                        f"Failed to write per-version manifest {name}: "
                        f"{type(e).__name__}: {e}"
                    )
                    report.failed[name] = f"{type(e).__name__}: {e}"

        report.written.sort()
        logger.info(
            f"Wrote {len(report.written)} per-version manifests, "
            f"{len(report.failed)} failed"
        )
        return report
