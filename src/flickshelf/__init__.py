"""FlickShelf - browse and play a locally synced media library."""

from flickshelf._version import __version__

__all__ = ["__version__"]
