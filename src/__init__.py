"""reqintake: request intake with duplicate screening."""

from reqintake.version import __version__

__all__ = ["__version__"]
