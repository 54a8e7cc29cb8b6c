"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. Every path a
run touches is redirected into ``tmp_path``.
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from syscleaner.core.audit import AuditLog
from syscleaner.core.config import RunConfig, Settings
from syscleaner.core.executor import Executor
from syscleaner.policy.matrix import ModePolicy
from syscleaner.policy.models import Mode


@pytest.fixture(autouse=True)
def no_live_shells() -> Iterator[None]:
    """Never discover (and signal) the real shells of the test runner."""
    with patch("syscleaner.history.reconciler.psutil.process_iter", return_value=[]):
        yield


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with every system location moved under tmp_path."""
    log_dir = tmp_path / "var" / "log"
    log_dir.mkdir(parents=True, exist_ok=True)
    home_root = tmp_path / "home"
    home_root.mkdir(exist_ok=True)
    root_home = tmp_path / "root"
    root_home.mkdir(exist_ok=True)
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir(exist_ok=True)

    return Settings(
        audit_log=log_dir / "system-cleaner-audit.log",
        backup_dir=tmp_path / "backups",
        log_dir=log_dir,
        home_root=home_root,
        root_home=root_home,
        temp_dirs=(temp_dir,),
        flush_grace_seconds=0.0,
    )


@pytest.fixture
def make_config(settings: Settings) -> Callable[..., RunConfig]:
    """Factory for RunConfig values bound to the tmp_path settings."""

    def _make(
        mode: Mode = Mode.STANDARD,
        dry_run: bool = False,
        backup: bool = False,
        **overrides: object,
    ) -> RunConfig:
        run_settings = settings.model_copy(update=overrides) if overrides else settings
        return RunConfig(mode=mode, dry_run=dry_run, backup=backup, settings=run_settings)

    return _make


@pytest.fixture
def make_executor(make_config: Callable[..., RunConfig]) -> Callable[..., Executor]:
    """Factory for Executors writing to the tmp_path audit log."""

    def _make(mode: Mode = Mode.STANDARD, dry_run: bool = False, **overrides: object) -> Executor:
        config = make_config(mode=mode, dry_run=dry_run, **overrides)
        audit = AuditLog(config.settings.audit_log, config.mode, config.session_id)
        policy = ModePolicy(config.settings.build_guard(), config.settings.temp_max_age_days)
        return Executor(config, audit, policy)

    return _make
