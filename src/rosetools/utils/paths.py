"""
Path translation between VFS archive paths and host paths.

Indices store paths with the archive separator (backslash). In memory they
are kept with the host separator so they can be joined onto a real output
directory directly.
"""

import os

from ..config import get_config


def from_rose_path(path: str, host_sep: str = os.sep) -> str:
    """Archive path -> host path."""
    return path.replace(get_config().archive_separator, host_sep)


def to_rose_path(path: str, host_sep: str = os.sep) -> str:
    """Host path -> archive path. Forward slashes are always treated as separators."""
    sep = get_config().archive_separator
    converted = path.replace(host_sep, sep)
    if sep != "/":
        converted = converted.replace("/", sep)
    return converted
