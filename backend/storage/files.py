"""On-disk file store for uploaded versions.

Each version owns one directory, ``<root>/<version_id>/``, holding the
already-extracted HTML/CSS files of that revision.  This module reads
from that tree and, for the CLI, copies a directory in or removes one.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional

from backend.config import settings
from backend.errors import NotFoundError, RepositoryError


class VersionStore:
    """Page lister, page reader and manifest reader for stored versions."""

    def __init__(self, root: Optional[Path] = None, manifest_name: Optional[str] = None) -> None:
        self.root = Path(root) if root is not None else settings.storage_dir
        self.manifest_name = manifest_name or settings.flow_manifest_name

    def version_dir(self, version_id: str) -> Path:
        return self.root / version_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_pages(self, version_id: str) -> List[str]:
        """Return every ``.html`` file of the version as a sorted POSIX path.

        Sub-directories are walked.  A version with no directory yet has no
        pages.

        Raises:
            RepositoryError: If the directory exists but cannot be walked.
        """
        base = self.version_dir(version_id)
        if not base.is_dir():
            return []
        try:
            pages = [
                p.relative_to(base).as_posix()
                for p in base.rglob("*")
                if p.is_file() and p.suffix.lower() == ".html"
            ]
        except OSError as exc:
            raise RepositoryError(f"listing pages of {version_id!r} failed: {exc}") from exc
        return sorted(pages)

    def open_page(self, version_id: str, path: str) -> bytes:
        """Return the raw markup of one page.

        Raises:
            NotFoundError: If the page does not exist.
            RepositoryError: If it exists but cannot be read.
        """
        target = self.version_dir(version_id) / path
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(f"Page not found: {path!r}") from exc
        except OSError as exc:
            raise RepositoryError(f"reading {path!r} failed: {exc}") from exc

    def open_manifest(self, version_id: str) -> Optional[bytes]:
        """Return the raw flow manifest, or ``None`` when the version has none.

        Raises:
            RepositoryError: If the manifest exists but cannot be read.
        """
        target = self.version_dir(version_id) / self.manifest_name
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise RepositoryError(f"reading {self.manifest_name!r} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def import_directory(self, version_id: str, source_dir: Path) -> List[str]:
        """Copy an already-extracted project directory into the version slot.

        A copy that fails partway is removed, so the slot is either complete
        or absent.

        Returns:
            The pages now available for the version.

        Raises:
            NotFoundError: If *source_dir* is not a directory.
            RepositoryError: If copying fails.
        """
        source = Path(source_dir)
        if not source.is_dir():
            raise NotFoundError(f"Directory not found: {str(source)!r}")
        target = self.version_dir(version_id)
        if target.exists():
            raise RepositoryError(f"files for {version_id!r} are already stored")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, target)
        except OSError as exc:
            shutil.rmtree(target, ignore_errors=True)
            raise RepositoryError(f"storing files for {version_id!r} failed: {exc}") from exc
        return self.list_pages(version_id)

    def remove_version(self, version_id: str) -> None:
        """Delete the files of a version.  A missing slot is not an error.

        Raises:
            RepositoryError: If the slot exists but cannot be removed.
        """
        target = self.version_dir(version_id)
        if not target.exists():
            return
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise RepositoryError(f"removing files of {version_id!r} failed: {exc}") from exc
