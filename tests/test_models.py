"""Unit tests for src/models.py."""

import pytest

from src.exceptions import MalformedVersionError
from src.models import (
    BuildTrackRegistry,
    ChannelSnapshot,
    FlatCatalog,
    KnownGoodRegistry,
    MilestoneRegistry,
    Version,
    VersionEntry,
)

DASHBOARD = {
    "timestamp": "2024-01-15T12:00:00.000Z",
    "channels": {
        "Stable": {"channel": "Stable", "version": "120.0.6099.109", "revision": "1217362", "ok": True},
        "Beta": {"channel": "Beta", "version": "121.0.6167.16", "revision": "1233107", "ok": False},
    },
}


class TestVersion:
    def test_parse_and_str(self):
        version = Version.parse("120.0.6099.5")
        assert version.parts == (120, 0, 6099, 5)
        assert str(version) == "120.0.6099.5"

    def test_properties(self):
        version = Version.parse("120.0.6099.5")
        assert version.milestone == "120"
        assert version.build == "120.0.6099"
        assert version.patch == 5

    def test_ordering(self):
        assert Version.parse("120.0.6099.5") < Version.parse("120.0.6099.10")
        assert Version.parse("120.0.6099.10") > Version.parse("120.0.6099.5")
        assert Version.parse("120.0.6099.5") <= Version.parse("120.0.6099.5")

    def test_mismatched_lengths_not_comparable(self):
        with pytest.raises(MalformedVersionError) as exc_info:
            Version.parse("1.2.3") < Version.parse("1.2.3.4")
        message = str(exc_info.value)
        assert "1.2.3 vs 1.2.3.4" in message
        assert "different number of components" in message

    def test_padded(self):
        assert Version.parse("1.2.3").padded(4) == (1, 2, 3, 0)
        assert Version.parse("1.2.3.4").padded(4) == (1, 2, 3, 4)
        assert Version.parse("1.2.3.4").padded(3) == (1, 2, 3, 4)

    def test_single_spelling(self):
        assert str(Version.parse("0.10.200.3000")) == "0.10.200.3000"
        with pytest.raises(MalformedVersionError):
            Version.parse("0.010.200.3000")

    def test_hashable(self):
        assert len({Version.parse("1.2.3"), Version.parse("1.2.3")}) == 1


class TestChannelSnapshot:
    def test_from_dashboard(self):
        snapshot = ChannelSnapshot.from_dict(DASHBOARD)
        assert set(snapshot.channels) == {"Stable", "Beta"}
        assert snapshot.channels["Stable"].ok is True
        assert snapshot.channels["Beta"].ok is False
        assert snapshot.channels["Stable"].revision == "1217362"

    def test_missing_ok_is_not_ok(self):
        snapshot = ChannelSnapshot.from_dict(
            {"channels": {"Dev": {"channel": "Dev", "version": "1.2.3.4", "revision": "1"}}}
        )
        assert snapshot.channels["Dev"].ok is False


class TestRegistries:
    def test_known_good_registry_round_trip(self):
        data = {
            "timestamp": "2024-01-15T12:00:00.000Z",
            "channels": {
                "Stable": {"channel": "Stable", "version": "120.0.6099.109", "revision": "1217362"},
            },
        }
        assert KnownGoodRegistry.from_dict(data).to_dict() == data

    def test_flat_catalog_keeps_order(self):
        data = {
            "timestamp": "t",
            "versions": [
                {"version": "113.0.5672.0", "revision": "1121455"},
                {"version": "113.0.5672.2", "revision": "1121455"},
            ],
        }
        assert FlatCatalog.from_dict(data).to_dict() == data

    def test_milestone_registry_fills_missing_milestone_field(self):
        registry = MilestoneRegistry.from_dict(
            {"timestamp": "t", "milestones": {"120": {"version": "120.0.6099.5", "revision": "1"}}}
        )
        assert registry.milestones["120"].milestone == "120"

    def test_build_track_registry_to_dict(self):
        registry = BuildTrackRegistry(
            timestamp="t", builds={"120.0.6099": VersionEntry("120.0.6099.5", "1")}
        )
        assert registry.to_dict() == {
            "timestamp": "t",
            "builds": {"120.0.6099": {"version": "120.0.6099.5", "revision": "1"}},
        }

    def test_missing_key_raises(self):
        with pytest.raises(KeyError):
            FlatCatalog.from_dict({"timestamp": "t"})
