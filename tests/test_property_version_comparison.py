"""Property-based tests for dotted-numeric version comparison."""

from functools import cmp_to_key

from hypothesis import given
from hypothesis import strategies as st

from src.models import Version
from src.utils import compare_versions, is_older_version

version_component = st.integers(min_value=0, max_value=99999)

version_strategy = st.builds(
    lambda parts: ".".join(str(part) for part in parts),
    st.lists(version_component, min_size=4, max_size=4),
)


@given(a=version_strategy, b=version_strategy)
def test_comparison_is_total(a: str, b: str):
    """Exactly one of a < b, a == b, b < a holds."""
    outcomes = [is_older_version(a, b), a == b, is_older_version(b, a)]
    assert outcomes.count(True) == 1


@given(a=version_strategy, b=version_strategy)
def test_comparison_matches_integer_tuples(a: str, b: str):
    """Ordering follows the numeric components, never the string form."""
    parts_a = tuple(int(part) for part in a.split("."))
    parts_b = tuple(int(part) for part in b.split("."))
    assert is_older_version(a, b) == (parts_a < parts_b)


@given(a=version_strategy, b=version_strategy, c=version_strategy)
def test_comparison_is_transitive(a: str, b: str, c: str):
    if is_older_version(a, b) and is_older_version(b, c):
        assert is_older_version(a, c)


@given(
    prefix=st.lists(version_component, min_size=3, max_size=3),
    patch=st.integers(min_value=1, max_value=9),
)
def test_single_digit_patch_older_than_multiple_of_ten(prefix: list[int], patch: int):
    """x.y.z.9 < x.y.z.90: catches lexicographic comparison."""
    base = ".".join(str(part) for part in prefix)
    assert is_older_version(f"{base}.{patch}", f"{base}.{patch * 10}")


@given(versions=st.lists(version_strategy, max_size=20))
def test_compare_versions_sorts_like_version_objects(versions: list[str]):
    by_comparator = sorted(versions, key=cmp_to_key(compare_versions))
    by_value = sorted(versions, key=Version.parse)
    assert [Version.parse(v) for v in by_comparator] == [Version.parse(v) for v in by_value]


@given(version=version_strategy)
def test_version_equals_itself(version: str):
    assert compare_versions(version, version) == 0
    assert not is_older_version(version, version)
    assert str(Version.parse(version)) == version
