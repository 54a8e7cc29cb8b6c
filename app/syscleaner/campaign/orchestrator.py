"""Cleanup campaign sequencing.

The campaign always runs its steps in the same order. The mode only
changes whether and how hard each step acts. Every step is best-effort:
a failing resource is recorded and the campaign moves on.
"""

import logging
import shutil
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from syscleaner.campaign.targets import (
    iter_empty_dirs,
    iter_home_dirs,
    iter_journal_resources,
    iter_log_resources,
    iter_temp_resources,
    iter_user_cache_resources,
)
from syscleaner.core.audit import AuditLog
from syscleaner.core.config import RunConfig
from syscleaner.core.executor import (
    ActionOutcome,
    Command,
    Executor,
    OutcomeStatus,
    delete_path,
)
from syscleaner.core.paths import DROP_CACHES_PATH, JOURNAL_DIRS
from syscleaner.history.reconciler import HistoryReconciler, home_owner
from syscleaner.operators.backup import BackupExporter
from syscleaner.operators.base import PackageCacheDriver
from syscleaner.operators.container import DockerEngine
from syscleaner.operators.packages import get_available_drivers
from syscleaner.operators.services import ServiceSupervisor
from syscleaner.policy.matrix import ModePolicy
from syscleaner.policy.models import ActionKind, Mode, Resource, ResourceKind

logger = logging.getLogger(__name__)


def disk_usage_percent(path: str = "/") -> int:
    """Return the used share of the filesystem holding ``path``, rounded up like df."""
    usage = shutil.disk_usage(path)
    capacity = usage.used + usage.free
    if capacity == 0:
        return 0
    return -(-usage.used * 100 // capacity)


def drop_page_cache() -> None:
    """Ask the kernel to drop clean page-cache pages."""
    DROP_CACHES_PATH.write_text("1\n")


@dataclass
class CampaignReport:
    """Outcomes collected over a whole campaign.

    Attributes:
        outcomes: Every action outcome, in execution order.
        disk_ok: False if the disk precheck reported high usage.
        backup_path: Backup directory written by this run, if any.
    """

    outcomes: list[ActionOutcome] = field(default_factory=list)
    disk_ok: bool = True
    backup_path: Path | None = None

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def performed(self) -> int:
        return self._count(OutcomeStatus.PERFORMED)

    @property
    def simulated(self) -> int:
        return self._count(OutcomeStatus.SIMULATED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)


class CampaignOrchestrator:
    """Runs the full cleanup sequence for one RunConfig.

    Collaborators default to the real host implementations and can be
    replaced for testing.
    """

    def __init__(
        self,
        config: RunConfig,
        *,
        audit: AuditLog | None = None,
        drivers: list[PackageCacheDriver] | None = None,
        supervisor: ServiceSupervisor | None = None,
        container: DockerEngine | None = None,
        exporter: BackupExporter | None = None,
        journal_dirs: tuple[Path, ...] = JOURNAL_DIRS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        settings = config.settings
        self.config = config
        self.audit = audit or AuditLog(settings.audit_log, config.mode, config.session_id)
        self.policy = ModePolicy(settings.build_guard(), settings.temp_max_age_days)
        self.executor = Executor(config, self.audit, self.policy)
        self.reconciler = HistoryReconciler(self.executor, sleep=sleep)
        self.drivers = drivers if drivers is not None else get_available_drivers()
        self.supervisor = supervisor or ServiceSupervisor()
        self.container = container or DockerEngine()
        self.exporter = exporter or BackupExporter(settings)
        self.journal_dirs = journal_dirs
        self._clock = clock
        self.report = CampaignReport()

    @property
    def mode(self) -> Mode:
        return self.config.mode

    def run(self) -> CampaignReport:
        """Run every step in order and return the collected outcomes."""
        self.audit.start_session()

        steps: list[tuple[str, Callable[[], object]]] = [
            ("disk precheck", self.check_disk_space),
            ("backup", self.create_backup),
            ("journal", self.clean_journal),
            ("logs", self.clean_logs),
            ("temp", self.clean_temp),
            ("package caches", self.clean_package_caches),
            ("user data", self.clean_user_data),
            ("containers", self.clean_containers),
            ("memory", self.drop_caches),
            ("session history", self.clear_session_history),
            ("services", self.restart_services),
            ("history sync", self.sync_history),
        ]
        try:
            for name, step in steps:
                try:
                    step()
                except Exception as e:
                    logger.debug("Step %s failed", name, exc_info=True)
                    self.audit.error(f"Step '{name}' stopped early: {e}")
        finally:
            self.finish()
        return self.report

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _run(self, command: Command) -> ActionOutcome:
        outcome = self.executor.run(command)
        self.report.outcomes.append(outcome)
        return outcome

    def _apply(self, resource: Resource) -> ActionOutcome:
        outcome = self.executor.apply(resource)
        self.report.outcomes.append(outcome)
        return outcome

    def _remove_entries(self, directory: Path) -> None:
        """Remove every entry of a directory that the guard allows."""
        if not directory.is_dir():
            return
        for entry in sorted(directory.iterdir()):
            if self.policy.guard.is_protected(str(entry)):
                logger.debug("Protected entry kept: %s", entry)
                self.report.outcomes.append(
                    ActionOutcome(OutcomeStatus.SKIPPED, str(entry), reason="protected")
                )
                continue
            self._run(Command(f"rm -rf {entry}", func=partial(delete_path, entry)))

    def _all_homes(self) -> list[Path]:
        homes = list(iter_home_dirs(self.config.settings.home_root))
        root_home = self.config.settings.root_home
        if root_home.is_dir() and root_home not in homes:
            homes.append(root_home)
        return homes

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def check_disk_space(self) -> bool:
        """Warn when root filesystem usage is above the threshold.

        Returns:
            False if usage is above the threshold. The campaign continues either way.
        """
        usage = disk_usage_percent("/")
        if usage > self.config.settings.disk_usage_threshold:
            self.audit.warning(f"Disk usage: {usage}% - manual cleanup recommended")
            self.report.disk_ok = False
            return False
        return True

    def create_backup(self) -> None:
        if not self.config.backup:
            return
        destination = self.config.backup_path
        self.audit.info(f"Creating backup at: {destination}")
        outcome = self._run(
            Command(
                f"backup to {destination}",
                func=partial(self.exporter.export, destination, self.config.session_id),
            )
        )
        if outcome.status == OutcomeStatus.PERFORMED:
            self.report.backup_path = destination
            self.audit.success("Backup created successfully")

    def clean_journal(self) -> None:
        if not self.supervisor.is_available():
            return
        self.audit.info("Cleaning systemd journals...")
        for command in self.supervisor.journal_commands():
            self._run(command)
        for resource in iter_journal_resources(self.journal_dirs):
            self._apply(resource)

    def clean_logs(self) -> None:
        settings = self.config.settings
        self.audit.info("Cleaning system logs...")
        for resource in iter_log_resources(settings.log_dir, settings.audit_log):
            self._apply(resource)

    def clean_temp(self) -> None:
        self.audit.info("Cleaning temporary files...")
        prune_dirs = self.policy.mode_action(ResourceKind.TEMP_ENTRY, self.mode).kind == (
            ActionKind.DELETE
        )
        now = self._clock()
        for temp_dir in self.config.settings.temp_dirs:
            if not temp_dir.is_dir():
                continue
            for resource in iter_temp_resources(temp_dir, now):
                self._apply(resource)
            if not prune_dirs:
                continue
            for empty_dir in list(iter_empty_dirs(temp_dir)):
                if self.policy.guard.is_protected(str(empty_dir)):
                    continue
                self._run(Command(f"rmdir {empty_dir}", func=empty_dir.rmdir))

    def clean_package_caches(self) -> None:
        self.audit.info("Cleaning package manager caches...")
        for driver in self.drivers:
            resource = Resource(ResourceKind.PACKAGE_CACHE, driver.cache_path)
            action = self.policy.resolve_action(resource, self.mode)
            if action.is_skip:
                logger.debug("Package cache of %s skipped (%s)", driver.name, action.reason)
                continue
            for command in driver.clean_commands(purge_lists=action.purge_lists):
                self._run(command)
            paths = driver.clean_paths()
            if action.purge_lists:
                paths += driver.purge_paths()
            for path in paths:
                self._remove_entries(Path(path))

    def clean_user_data(self) -> None:
        self.audit.info("Cleaning user data...")
        for home in iter_home_dirs(self.config.settings.home_root):
            self.audit.info(f"Processing: {home}")
            self._clean_home(home)

        root_home = self.config.settings.root_home
        if root_home.is_dir():
            self.audit.info("Cleaning root data...")
            self._clean_home(root_home)

    def _clean_home(self, home: Path) -> None:
        self.report.outcomes.extend(self.reconciler.reconcile_home(home))
        owner = home_owner(home)
        for resource in iter_user_cache_resources(home, owner):
            self._apply(resource)

    def clean_containers(self) -> None:
        if not self.container.is_available():
            return
        resource = Resource(ResourceKind.CONTAINER_CACHE, self.container.cache_path)
        if self.policy.resolve_action(resource, self.mode).is_skip:
            return
        self.audit.info("Cleaning Docker...")
        for command in self.container.prune_commands():
            self._run(command)

    def drop_caches(self) -> None:
        if self.mode != Mode.STEALTH_MAX or self.config.dry_run:
            return
        self.audit.info("Optimizing memory...")
        self._run(Command.external("sync"))
        self._run(Command(f"echo 1 > {DROP_CACHES_PATH}", func=drop_page_cache))

    def clear_session_history(self) -> None:
        """Clear this interpreter's own in-memory readline history."""
        if not self.mode.is_stealth or self.config.dry_run:
            return
        readline = sys.modules.get("readline")
        if readline is not None:
            readline.clear_history()
            logger.debug("In-process readline history cleared")

    def restart_services(self) -> None:
        if not self.supervisor.is_available():
            return
        for command in self.supervisor.restart_commands():
            self._run(command)

    def sync_history(self) -> None:
        self.audit.info("Synchronizing shell history...")
        self.report.outcomes.extend(self.reconciler.sync_active_sessions(self._all_homes()))

    def finish(self) -> None:
        """Write the closing records and restrict the audit file."""
        if self.mode.is_stealth:
            self.audit.info("Operation completed")
        else:
            self.audit.success("Cleanup completed successfully")
            self.audit.info(f"Audit log: {self.config.settings.audit_log}")
            if self.report.backup_path is not None:
                self.audit.info(f"Backup: {self.report.backup_path}")
            if not self.config.dry_run:
                self.audit.info(f"Current disk usage: {disk_usage_percent('/')}%")
        self.audit.finalize()
