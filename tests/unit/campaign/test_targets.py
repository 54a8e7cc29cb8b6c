"""Unit tests for cleanup candidate enumeration."""

import os
import time
from pathlib import Path

from syscleaner.campaign.targets import (
    iter_empty_dirs,
    iter_home_dirs,
    iter_journal_resources,
    iter_log_resources,
    iter_temp_resources,
    iter_user_cache_resources,
)
from syscleaner.policy.models import ResourceKind


def _kinds(resources: list) -> dict[str, ResourceKind]:
    return {Path(r.path).name: r.kind for r in resources}


class TestIterLogResources:
    """Tests for iter_log_resources function."""

    def test_classifies_files(self, tmp_path: Path) -> None:
        (tmp_path / "syslog.log").write_text("x")
        (tmp_path / "syslog.1").write_text("x")
        (tmp_path / "kern.log.gz").write_text("x")
        (tmp_path / "dmesg").write_text("x")
        (tmp_path / "nginx").mkdir()
        (tmp_path / "nginx" / "access").write_text("x")
        (tmp_path / "nginx" / "rules.keep").write_text("x")
        audit = tmp_path / "audit.log"
        audit.write_text("x")

        kinds = _kinds(list(iter_log_resources(tmp_path, audit)))

        assert kinds == {
            "syslog.log": ResourceKind.LOG_FILE,
            "syslog.1": ResourceKind.LOG_ARCHIVE,
            "kern.log.gz": ResourceKind.LOG_ARCHIVE,
            "access": ResourceKind.LOG_FILE,
            "audit.log": ResourceKind.AUDIT_ARTIFACT,
        }

    def test_symlinks_skipped(self, tmp_path: Path) -> None:
        """Symlinks are never followed or yielded."""
        outside = tmp_path / "outside.log"
        outside.write_text("x")
        log_dir = tmp_path / "log"
        log_dir.mkdir()
        (log_dir / "link.log").symlink_to(outside)

        assert list(iter_log_resources(log_dir, log_dir / "audit.log")) == []


class TestIterTempResources:
    """Tests for iter_temp_resources function."""

    def test_ages_from_atime(self, tmp_path: Path) -> None:
        old = tmp_path / "old.bin"
        old.write_text("x")
        now = time.time()
        os.utime(old, (now - 3 * 86400, now - 3 * 86400))

        (resource,) = list(iter_temp_resources(tmp_path, now))

        assert resource.kind == ResourceKind.TEMP_ENTRY
        assert resource.age_seconds is not None
        assert resource.age_seconds >= 3 * 86400 - 1

    def test_hidden_entries_skipped(self, tmp_path: Path) -> None:
        (tmp_path / ".X11-unix").mkdir()
        (tmp_path / ".X11-unix" / "X0").write_text("x")
        (tmp_path / ".lock").write_text("x")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "visible").write_text("x")

        names = [Path(r.path).name for r in iter_temp_resources(tmp_path, time.time())]

        assert names == ["visible"]


class TestIterEmptyDirs:
    """Tests for iter_empty_dirs function."""

    def test_deepest_first(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "full").mkdir()
        (tmp_path / "full" / "f").write_text("x")
        (tmp_path / ".hidden").mkdir()

        assert list(iter_empty_dirs(tmp_path)) == [tmp_path / "a" / "b"]


class TestIterJournalResources:
    """Tests for iter_journal_resources function."""

    def test_top_level_entries(self, tmp_path: Path) -> None:
        (tmp_path / "machine-id").mkdir()
        (tmp_path / "machine-id" / "system.journal").write_text("x")

        resources = list(iter_journal_resources((tmp_path, tmp_path / "absent")))

        assert [r.path for r in resources] == [str(tmp_path / "machine-id")]
        assert resources[0].kind == ResourceKind.JOURNAL_FILE


class TestHomeAndUserCaches:
    """Tests for iter_home_dirs and iter_user_cache_resources."""

    def test_home_dirs(self, tmp_path: Path) -> None:
        (tmp_path / "alice").mkdir()
        (tmp_path / "bob").mkdir()
        (tmp_path / "stray.txt").write_text("x")

        assert [p.name for p in iter_home_dirs(tmp_path)] == ["alice", "bob"]

    def test_missing_home_root(self, tmp_path: Path) -> None:
        assert list(iter_home_dirs(tmp_path / "absent")) == []

    def test_user_caches(self, tmp_path: Path) -> None:
        home = tmp_path / "alice"
        (home / ".cache" / "thumbnails" / "normal").mkdir(parents=True)
        (home / ".local" / "share" / "Trash" / "files").mkdir(parents=True)
        (home / ".local" / "share" / "Trash" / "files" / "old.txt").write_text("x")
        (home / ".mozilla").mkdir()

        resources = list(iter_user_cache_resources(home, "alice"))

        assert [r.path for r in resources] == [
            str(home / ".cache" / "thumbnails" / "normal"),
            str(home / ".local" / "share" / "Trash" / "files" / "old.txt"),
        ]
        assert all(r.owner == "alice" for r in resources)
        assert all(r.kind == ResourceKind.USER_CACHE_ENTRY for r in resources)

    def test_symlinked_directory_out_of_home_skipped(self, tmp_path: Path) -> None:
        """A cache directory linked out of the home yields nothing."""
        outside = tmp_path / "etc"
        outside.mkdir()
        (outside / "passwd").write_text("root:x:0:0\n")
        home = tmp_path / "mallory"
        (home / ".local" / "share" / "Trash").mkdir(parents=True)
        (home / ".local" / "share" / "Trash" / "files").symlink_to(outside)

        assert list(iter_user_cache_resources(home, "mallory")) == []

    def test_symlinked_entry_is_yielded_itself(self, tmp_path: Path) -> None:
        """A symlink inside the trash is yielded as the link, not its target."""
        outside = tmp_path / "etc"
        outside.mkdir()
        home = tmp_path / "mallory"
        trash = home / ".local" / "share" / "Trash" / "files"
        trash.mkdir(parents=True)
        (trash / "link").symlink_to(outside)

        resources = list(iter_user_cache_resources(home, "mallory"))

        assert [r.path for r in resources] == [str(trash / "link")]
