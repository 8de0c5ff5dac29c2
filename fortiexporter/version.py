"""Parsing of FortiOS version strings such as ``v6.4.4``."""

import re

_VERSION_RE = re.compile(r"v([+-]?\d+)\.([+-]?\d+)\.")


def parse_version(ver):
    """Return ``(major, minor)`` from a version string like ``v7.0.12``.

    Raises ValueError when the string does not have that shape.
    """
    match = _VERSION_RE.match(ver)
    if match is None:
        raise ValueError(f"could not parse version number {ver!r}")
    return int(match.group(1)), int(match.group(2))