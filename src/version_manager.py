"""Registry merge logic for tracking known good versions."""

import copy
import logging
from collections.abc import Callable
from functools import cmp_to_key

from src.models import (
    BuildTrackRegistry,
    ChannelEntry,
    ChannelSnapshot,
    FlatCatalog,
    KnownGoodRegistry,
    MilestoneEntry,
    MilestoneRegistry,
    UpdateResult,
    VersionEntry,
)
from src.utils import (
    build_prefix_of,
    compare_versions,
    create_timestamp,
    is_older_version,
    milestone_of,
    parse_version,
)

logger = logging.getLogger(__name__)


class VersionManager:
    """Updates the persisted registries from a freshly observed channel snapshot.

    Every method takes the previous registry value and returns the next one
    wrapped in an UpdateResult; inputs are never mutated. The timestamp of a
    registry is bumped at most once per call, and only if something changed.
    """

    def __init__(self, clock: Callable[[], str] | None = None):
        """Initialize the version manager.

        Args:
            clock: Callable returning the timestamp to stamp changed registries
                with. Defaults to the current UTC time.
        """
        self.clock = clock or create_timestamp

    def reconcile_last_known_good(
        self, snapshot: ChannelSnapshot, registry: KnownGoodRegistry
    ) -> UpdateResult:
        """Apply the channel snapshot to the last-known-good registry.

        Channels whose record is not ``ok`` are left untouched so that a
        transient outage never erases previously good data.

        Args:
            snapshot: Current version per channel.
            registry: Persisted last-known-good registry.

        Returns:
            UpdateResult holding the new KnownGoodRegistry.
        """
        updated = copy.deepcopy(registry)
        changed = False

        for record in snapshot.channels.values():
            if not record.ok:
                logger.debug(f"Skipping channel {record.channel}: no valid build")
                continue

            parse_version(record.version)
            known = updated.channels.get(record.channel)
            if (
                known is not None
                and known.version == record.version
                and known.revision == record.revision
            ):
                continue

            if known is None:
                logger.info(f"Adding channel {record.channel} at {record.version}")
                updated.channels[record.channel] = ChannelEntry(
                    channel=record.channel,
                    version=record.version,
                    revision=record.revision,
                )
            else:
                logger.info(
                    f"Channel {record.channel} moved from {known.version} "
                    f"to {record.version}"
                )
                known.version = record.version
                known.revision = record.revision
            changed = True

        if changed:
            updated.timestamp = self.clock()
        logger.info(f"Last known good versions changed: {changed}")
        return UpdateResult(document=updated, changed=changed)

    def merge_known_good_versions(
        self, registry: KnownGoodRegistry, catalog: FlatCatalog
    ) -> UpdateResult:
        """Add every channel's version to the flat catalog if it is not there yet.

        The catalog never holds two entries with the same version and is kept
        sorted ascending by version.

        Args:
            registry: Last-known-good registry to take versions from.
            catalog: Persisted flat catalog.

        Returns:
            UpdateResult holding the new FlatCatalog.
        """
        updated = copy.deepcopy(catalog)
        known_versions = {entry.version for entry in updated.versions}
        added = []

        for entry in registry.channels.values():
            if entry.version in known_versions:
                continue
            parse_version(entry.version)
            known_versions.add(entry.version)
            updated.versions.append(
                VersionEntry(version=entry.version, revision=entry.revision)
            )
            added.append(entry.version)

        if added:
            updated.versions.sort(
                key=cmp_to_key(lambda a, b: compare_versions(a.version, b.version))
            )
            updated.timestamp = self.clock()
            logger.info(f"Added {len(added)} versions to catalog: {', '.join(added)}")
        else:
            logger.info("No new versions for catalog")

        return UpdateResult(document=updated, changed=bool(added))

    def update_latest_versions_per_milestone(
        self, registry: KnownGoodRegistry, milestones: MilestoneRegistry
    ) -> UpdateResult:
        """Record the newest version seen for each milestone.

        A stored milestone version is only ever replaced by a strictly newer one.

        Args:
            registry: Last-known-good registry to take versions from.
            milestones: Persisted milestone registry.

        Returns:
            UpdateResult holding the new MilestoneRegistry.
        """
        updated = copy.deepcopy(milestones)
        changed = False

        for entry in registry.channels.values():
            milestone = milestone_of(entry.version)
            current = updated.milestones.get(milestone)

            if current is None:
                logger.debug(f"New milestone {milestone} at {entry.version}")
                updated.milestones[milestone] = MilestoneEntry(
                    milestone=milestone,
                    version=entry.version,
                    revision=entry.revision,
                )
                changed = True
            elif is_older_version(current.version, entry.version):
                logger.debug(
                    f"Milestone {milestone} advanced from {current.version} "
                    f"to {entry.version}"
                )
                current.version = entry.version
                current.revision = entry.revision
                changed = True

        if changed:
            updated.timestamp = self.clock()
        logger.info(f"Latest versions per milestone changed: {changed}")
        return UpdateResult(document=updated, changed=changed)

    def prepare_latest_patch_versions_per_build(
        self, catalog: FlatCatalog
    ) -> BuildTrackRegistry:
        """Derive the latest patch version per build prefix from the catalog.

        Recomputed from scratch on every run; the result carries the catalog's
        timestamp.

        Args:
            catalog: Full flat catalog.

        Returns:
            BuildTrackRegistry keyed by build prefix (e.g. "120.0.6099").
        """
        latest: dict[str, VersionEntry] = {}

        for entry in catalog.versions:
            build = build_prefix_of(entry.version)
            known = latest.get(build)
            if known is None or is_older_version(known.version, entry.version):
                latest[build] = VersionEntry(
                    version=entry.version, revision=entry.revision
                )

        logger.info(f"Derived {len(latest)} build tracks from {len(catalog.versions)} versions")
        return BuildTrackRegistry(timestamp=catalog.timestamp, builds=latest)
