"""Helpers for building and splitting hierarchical store keys."""

import re

KEY_SEPARATOR = "/"

_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def compose_key(*segments: str) -> str:
    """Join key segments into a single hierarchical key.

    Segments are not validated. Empty segments are dropped and runs of
    separators collapse to one, so ``compose_key("/root/", "/node")`` is
    ``/root/node``.
    """
    joined = KEY_SEPARATOR.join(segment for segment in segments if segment)
    collapsed = _REPEATED_SEPARATORS.sub(KEY_SEPARATOR, joined)
    if len(collapsed) > 1:
        collapsed = collapsed.rstrip(KEY_SEPARATOR)
    return collapsed


def leaf_segment(key: str) -> str:
    """Return the final segment of a hierarchical key."""
    return key.rstrip(KEY_SEPARATOR).rsplit(KEY_SEPARATOR, 1)[-1]
