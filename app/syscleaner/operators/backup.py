"""Backup export of logs and root shell history before cleanup.

Each backup is a timestamped directory holding the copied files and a
``manifest.toml`` listing every copied file.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path

import tomli_w

from syscleaner.core.config import Settings

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.toml"

# Log subtrees copied as a whole, relative to the log directory.
LOG_SUBTREES: tuple[str, ...] = ("apt", "apache2", "nginx")

# Root history files and their names inside the backup.
ROOT_HISTORY_FILES: dict[str, str] = {
    ".bash_history": "root_bash_history",
    ".zsh_history": "root_zsh_history",
}


class BackupExporter:
    """Copies logs and root history into a backup directory.

    Missing sources are skipped silently; a source that fails to copy is
    logged and skipped so the rest of the backup still completes.

    Attributes:
        settings: Settings providing the log directory and root home.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def export(self, destination: Path, session_id: str) -> list[Path]:
        """Copy every backup source into ``destination`` and write the manifest.

        Args:
            destination: Backup directory for this run (created if missing).
            session_id: Run identifier recorded in the manifest.

        Returns:
            Paths of all copied files, relative to ``destination``.

        Raises:
            OSError: If the destination or the manifest cannot be written.
        """
        destination.mkdir(parents=True, exist_ok=True)
        log_dir = self.settings.log_dir

        for log_file in sorted(log_dir.glob("*.log")):
            if log_file.is_file():
                self._copy(log_file, destination / log_file.name)

        for subtree in LOG_SUBTREES:
            source = log_dir / subtree
            if source.is_dir():
                self._copy(source, destination / subtree)

        for name, target in ROOT_HISTORY_FILES.items():
            source = self.settings.root_home / name
            if source.is_file():
                self._copy(source, destination / target)

        copied = sorted(
            p.relative_to(destination)
            for p in destination.rglob("*")
            if p.is_file() and p.name != MANIFEST_FILENAME
        )
        self._write_manifest(destination, session_id, copied)
        logger.info("Backup of %d file(s) written to %s", len(copied), destination)
        return copied

    def _copy(self, source: Path, target: Path) -> None:
        try:
            if source.is_dir():
                shutil.copytree(source, target, dirs_exist_ok=True)
            else:
                shutil.copy2(source, target)
        except OSError as e:
            logger.warning("Backup skipped %s: %s", source, e)

    def _write_manifest(self, destination: Path, session_id: str, files: list[Path]) -> None:
        data = {
            "session_id": session_id,
            "created": datetime.now().isoformat(timespec="seconds"),
            "files": [str(destination / f) for f in files],
        }
        with open(destination / MANIFEST_FILENAME, "wb") as f:
            tomli_w.dump(data, f)
