"""Centralised settings for the Design Review backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("DESIGN_REVIEW_WORKSPACE", Path.home() / ".design_review")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "review.db"

    @property
    def storage_dir(self) -> Path:
        """Root directory holding one sub-directory of files per version."""
        return self.workspace_dir / "versions"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Page flow
    # ------------------------------------------------------------------
    flow_manifest_name: str = field(
        default_factory=lambda: os.environ.get("FLOW_MANIFEST_NAME", "flow.yaml")
    )
    flow_link_attribute: str = field(
        default_factory=lambda: os.environ.get("FLOW_LINK_ATTRIBUTE", "data-dr-link")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    # ------------------------------------------------------------------
    # CLI
    # ------------------------------------------------------------------
    cli_config_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("DESIGN_REVIEW_CLI_DIR", Path.home() / ".design_review_cli")
        )
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton: import this everywhere:
#   from backend.config import settings
settings = Settings()
