r"""
Deterministic property values for inserted vertices.

    from index_bench.keys import make_key

    make_key(544, prefix="email", suffix="@example.com")  # email544@example.com
"""

from collections.abc import Iterator

__all__ = ["make_key", "iter_keys"]


def make_key(j: int, *, prefix: str = "email", suffix: str = "@example.com") -> str:
    """Build the property value for insert index j."""
    return f"{prefix}{j}{suffix}"


def iter_keys(count: int, *, prefix: str = "email", suffix: str = "@example.com") -> Iterator[str]:
    """Yield the property values for insert indices 0..count-1."""
    for j in range(count):
        yield make_key(j, prefix=prefix, suffix=suffix)
