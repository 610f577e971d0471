"""Version comparison and availability helpers for the known-good versions registry."""

from datetime import UTC, datetime

from src.models import Version

CHROMEDRIVER = "chromedriver"
CHROME_HEADLESS_SHELL = "chrome-headless-shell"

# First releases that shipped each binary through Chrome for Testing.
CHROMEDRIVER_AVAILABLE_SINCE = "115.0.5763.0"
CHROME_HEADLESS_SHELL_AVAILABLE_SINCE = "120.0.6098.0"

AVAILABLE_SINCE = {
    CHROMEDRIVER: CHROMEDRIVER_AVAILABLE_SINCE,
    CHROME_HEADLESS_SHELL: CHROME_HEADLESS_SHELL_AVAILABLE_SINCE,
}


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted-numeric version string into a tuple of integers.

    Unlike a lenient parser this never coerces bad input: a string that is not
    3-4 dot-separated integers is rejected.

    Args:
        version: Version string to parse (e.g., "120.0.6099.5").

    Returns:
        Tuple of integers (e.g., (120, 0, 6099, 5)).

    Raises:
        MalformedVersionError: If the version string is malformed.

    Examples:
        >>> parse_version("120.0.6099.5")
        (120, 0, 6099, 5)
    """
    return Version.parse(version).parts


def is_older_version(a: str, b: str) -> bool:
    """Return True if version ``a`` is a strictly earlier release than ``b``.

    Raises:
        MalformedVersionError: If either version is malformed or they have a
            different number of components.
    """
    return Version.parse(a) < Version.parse(b)


def compare_versions(a: str, b: str) -> int:
    """Three-way comparison usable with functools.cmp_to_key."""
    if is_older_version(a, b):
        return -1
    if Version.parse(a) == Version.parse(b):
        return 0
    return 1


def milestone_of(version: str) -> str:
    """Return the milestone (first component) of a version, e.g. "120"."""
    return Version.parse(version).milestone


def build_prefix_of(version: str) -> str:
    """Return the version without its trailing patch component.

    >>> build_prefix_of("120.0.6099.5")
    '120.0.6099'
    """
    return Version.parse(version).build


def predates_availability(
    binary: str, version: str, available_since: dict[str, str] | None = None
) -> bool:
    """Check whether a binary was not yet shipped for the given version.

    Args:
        binary: Binary kind (e.g., "chromedriver").
        version: Version string of the release.
        available_since: Mapping of binary kind to first shipping version.
            Defaults to the built-in cutoffs.

    Returns:
        True if the binary has a cutoff and ``version`` is older than it.
        Versions of different lengths are compared as if the shorter one
        were padded with zeros, so "120.0.6098" is not older than
        "120.0.6098.0".
    """
    cutoffs = AVAILABLE_SINCE if available_since is None else available_since
    cutoff = cutoffs.get(binary)
    if cutoff is None:
        return False
    release = Version.parse(version)
    first = Version.parse(cutoff)
    length = max(len(release.parts), len(first.parts))
    return release.padded(length) < first.padded(length)


def create_timestamp() -> str:
    """Current UTC time in ISO-8601 with milliseconds, e.g. 2024-01-15T12:00:00.000Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
