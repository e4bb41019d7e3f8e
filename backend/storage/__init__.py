"""Storage package: per-version page files."""

from backend.storage.files import VersionStore

__all__ = ["VersionStore"]
