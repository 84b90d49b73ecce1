"""File-backed key-value store for ledger snapshots."""

import re
from pathlib import Path
from typing import Optional

from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)

TRAININGS_KEY = "trainings"
ADJUSTMENTS_KEY = "adjustments"
TAX_RATE_KEY = "tax_rate"
ANALYSIS_SETTINGS_KEY = "analysis_settings"
AUTH_KEY = "auth"

_KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


class BlobStore:
    """Stores one text blob per key as a file in a data directory.

    Writes replace the whole blob; there is no partial update and the last
    write wins.
    """

    def __init__(self, data_dir: Path):
        """Initialize the store.

        Args:
            data_dir: Directory for the blob files (created on first write).
        """
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Return the blob for key, or None if nothing is stored."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, text: str) -> None:
        """Replace the blob stored under key."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.debug(f"Wrote {len(text)} bytes to {path}")

    def delete(self, key: str) -> bool:
        """Remove the blob for key. Returns True if one existed."""
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        logger.debug(f"Removed {path}")
        return True

    def keys(self) -> list[str]:
        if not self.data_dir.exists():
            return []
        return sorted(p.stem for p in self.data_dir.glob("*.json"))
