"""Version lookup for FlickShelf.

The installed distribution's metadata is authoritative. When running from a
source checkout that was never installed, BASE_VERSION is reported with a
".dev0" suffix.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# Base version - bump this manually for releases
BASE_VERSION = "0.3.0"


def get_version() -> str:
    """Get the full version string."""
    try:
        return version("flickshelf")
    except PackageNotFoundError:
        return f"{BASE_VERSION}.dev0"


__version__ = get_version()
