"""HTTP API for funcdiff."""

from .. import __version__

__all__ = ["__version__"]
