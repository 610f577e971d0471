"""Unit tests for src/utils.py - version parsing, comparison and availability."""

import re
from functools import cmp_to_key

import pytest

from src.exceptions import MalformedVersionError
from src.utils import (
    build_prefix_of,
    compare_versions,
    create_timestamp,
    is_older_version,
    milestone_of,
    parse_version,
    predates_availability,
)


class TestParseVersionStandard:
    def test_four_part_version(self):
        assert parse_version("120.0.6099.5") == (120, 0, 6099, 5)

    def test_three_part_version(self):
        assert parse_version("1.2.3") == (1, 2, 3)

    def test_zero_components(self):
        assert parse_version("0.0.0.0") == (0, 0, 0, 0)


class TestParseVersionMalformed:
    @pytest.mark.parametrize(
        "version",
        [
            "",
            "120",
            "120.0",
            "1.2.3.4.5",
            "120.0.6099.x",
            "1.2.3-beta",
            ".1.2.3",
            "1..2.3",
            "-1.2.3",
            "120.0.1.01",
            "007.0.0",
            "\u0661\u0662\u0660.0.1.1",
            "120.0.1.1\n",
        ],
    )
    def test_rejects_malformed(self, version):
        with pytest.raises(MalformedVersionError):
            parse_version(version)

    def test_rejects_none(self):
        with pytest.raises(MalformedVersionError):
            parse_version(None)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_version("abc")


class TestIsOlderVersion:
    def test_numeric_not_lexicographic(self):
        assert is_older_version("120.0.6099.5", "120.0.6099.10")
        assert not is_older_version("120.0.6099.10", "120.0.6099.5")

    def test_major_decides(self):
        assert is_older_version("99.0.9999.999", "100.0.0.0")

    def test_equal_is_not_older(self):
        assert not is_older_version("120.0.6099.5", "120.0.6099.5")

    def test_different_lengths_rejected(self):
        with pytest.raises(MalformedVersionError) as exc_info:
            is_older_version("120.0.6099", "120.0.6099.5")
        assert "120.0.6099 vs 120.0.6099.5" in str(exc_info.value)


class TestCompareVersions:
    def test_three_way(self):
        assert compare_versions("1.2.3", "1.2.4") == -1
        assert compare_versions("1.2.4", "1.2.3") == 1
        assert compare_versions("1.2.3", "1.2.3") == 0

    def test_sorting_versions(self):
        versions = ["120.0.6099.10", "120.0.6099.5", "119.0.6045.105", "120.0.6099.9"]
        assert sorted(versions, key=cmp_to_key(compare_versions)) == [
            "119.0.6045.105",
            "120.0.6099.5",
            "120.0.6099.9",
            "120.0.6099.10",
        ]


class TestVersionParts:
    def test_milestone(self):
        assert milestone_of("120.0.6099.5") == "120"

    def test_build_prefix(self):
        assert build_prefix_of("120.0.6099.5") == "120.0.6099"

    def test_build_prefix_three_parts(self):
        assert build_prefix_of("1.2.3") == "1.2"

    def test_build_prefix_malformed(self):
        with pytest.raises(MalformedVersionError):
            build_prefix_of("120")


class TestAvailability:
    def test_chromedriver_cutoff(self):
        assert predates_availability("chromedriver", "114.0.5735.133")
        assert predates_availability("chromedriver", "115.0.5762.4")
        assert not predates_availability("chromedriver", "115.0.5763.0")
        assert not predates_availability("chromedriver", "120.0.6099.5")

    def test_headless_shell_cutoff(self):
        assert predates_availability("chrome-headless-shell", "119.0.6045.105")
        assert not predates_availability("chrome-headless-shell", "120.0.6098.0")
        assert not predates_availability("chrome-headless-shell", "121.0.6167.85")

    def test_three_part_versions_against_four_part_cutoffs(self):
        assert predates_availability("chromedriver", "114.0.5735")
        assert predates_availability("chromedriver", "115.0.5762")
        assert not predates_availability("chromedriver", "115.0.5763")
        assert not predates_availability("chrome-headless-shell", "120.0.6098")
        assert predates_availability("chrome-headless-shell", "120.0.6097")

    def test_four_part_version_against_three_part_cutoff(self):
        assert predates_availability("chrome", "1.9.9.9", {"chrome": "2.0.0"})
        assert not predates_availability("chrome", "2.0.0.0", {"chrome": "2.0.0"})
        assert not predates_availability("chrome", "2.0.0.1", {"chrome": "2.0.0"})

    def test_predates_availability_by_kind(self):
        assert predates_availability("chromedriver", "113.0.5672.0")
        assert predates_availability("chrome-headless-shell", "118.0.5993.70")
        assert not predates_availability("chrome-headless-shell", "120.0.6099.5")

    def test_binary_without_cutoff_never_predates(self):
        assert not predates_availability("chrome", "1.0.0.0")

    def test_custom_cutoffs(self):
        assert predates_availability("chrome", "1.0.0.0", {"chrome": "2.0.0.0"})
        assert not predates_availability("chromedriver", "1.0.0.0", {})


def test_create_timestamp_format():
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", create_timestamp())
