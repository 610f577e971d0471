"""Data models for the known-good versions registries."""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any

from src.exceptions import MalformedVersionError

# ASCII digits only, no leading zeros, so each Version has a single spelling.
VERSION_PATTERN = re.compile(r"(0|[1-9][0-9]*)(\.(0|[1-9][0-9]*)){2,3}")


@total_ordering
@dataclass(frozen=True)
class Version:
    """Parsed dotted-numeric version, e.g. ``120.0.6099.5``.

    Ordering is numeric and component-wise. Versions with a different number
    of components are not comparable and raise MalformedVersionError.
    """

    parts: tuple[int, ...]

    @classmethod
    def parse(cls, version: str) -> "Version":
        """Parse a version string.

        Args:
            version: Version string with 3 or 4 dot-separated integers.

        Returns:
            Parsed Version.

        Raises:
            MalformedVersionError: If the string has any other shape.
        """
        if not isinstance(version, str) or not VERSION_PATTERN.fullmatch(version):
            raise MalformedVersionError(version)
        return cls(tuple(int(part) for part in version.split(".")))

    @property
    def milestone(self) -> str:
        return str(self.parts[0])

    @property
    def build(self) -> str:
        """Version with its trailing patch component removed."""
        return ".".join(str(part) for part in self.parts[:-1])

    @property
    def patch(self) -> int:
        return self.parts[-1]

    def _check_comparable(self, other: "Version") -> None:
        if len(self.parts) != len(other.parts):
            raise MalformedVersionError(
                f"{self} vs {other}", "different number of components"
            )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        self._check_comparable(other)
        return self.parts < other.parts

    def padded(self, length: int) -> tuple[int, ...]:
        """Components right-padded with zeros to at least ``length`` entries."""
        return self.parts + (0,) * (length - len(self.parts))

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)


@dataclass
class ChannelRecord:
    """Current version of one release channel as observed in the dashboard."""

    channel: str
    version: str
    revision: str
    ok: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChannelRecord":
        return cls(
            channel=data["channel"],
            version=data["version"],
            revision=data["revision"],
            ok=bool(data.get("ok", False)),
        )


@dataclass
class ChannelSnapshot:
    """Per-channel snapshot, one ChannelRecord per channel."""

    channels: dict[str, ChannelRecord] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChannelSnapshot":
        """Create a snapshot from the dashboard document.

        Fields other than ``channels`` are ignored.
        """
        return cls(
            channels={
                name: ChannelRecord.from_dict(record)
                for name, record in data["channels"].items()
            }
        )


@dataclass
class ChannelEntry:
    channel: str
    version: str
    revision: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "version": self.version,
            "revision": self.revision,
        }


@dataclass
class VersionEntry:
    version: str
    revision: str

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "revision": self.revision}


@dataclass
class MilestoneEntry:
    milestone: str
    version: str
    revision: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestone": self.milestone,
            "version": self.version,
            "revision": self.revision,
        }


@dataclass
class KnownGoodRegistry:
    """Last known good version per channel."""

    timestamp: str
    channels: dict[str, ChannelEntry] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KnownGoodRegistry":
        channels = {}
        for name, entry in data["channels"].items():
            channels[name] = ChannelEntry(
                channel=entry.get("channel", name),
                version=entry["version"],
                revision=entry["revision"],
            )
        return cls(timestamp=data["timestamp"], channels=channels)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "channels": {
                name: entry.to_dict() for name, entry in self.channels.items()
            },
        }


@dataclass
class FlatCatalog:
    """All known good versions, deduplicated and sorted ascending."""

    timestamp: str
    versions: list[VersionEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlatCatalog":
        return cls(
            timestamp=data["timestamp"],
            versions=[
                VersionEntry(version=entry["version"], revision=entry["revision"])
                for entry in data["versions"]
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "versions": [entry.to_dict() for entry in self.versions],
        }


@dataclass
class MilestoneRegistry:
    """Latest known good version per major-version milestone."""

    timestamp: str
    milestones: dict[str, MilestoneEntry] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MilestoneRegistry":
        milestones = {}
        for key, entry in data["milestones"].items():
            milestones[key] = MilestoneEntry(
                milestone=entry.get("milestone", key),
                version=entry["version"],
                revision=entry["revision"],
            )
        return cls(timestamp=data["timestamp"], milestones=milestones)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "milestones": {
                key: entry.to_dict() for key, entry in self.milestones.items()
            },
        }


@dataclass
class BuildTrackRegistry:
    """Latest patch version per build prefix, derived from the FlatCatalog."""

    timestamp: str
    builds: dict[str, VersionEntry] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "builds": {prefix: entry.to_dict() for prefix, entry in self.builds.items()},
        }


@dataclass
class UpdateResult:
    """Outcome of one registry update pass."""

    document: Any
    changed: bool
