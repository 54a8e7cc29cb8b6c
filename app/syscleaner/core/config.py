"""Run configuration and settings.

Settings are loaded from a TOML file (all fields optional) and combined
with the parsed command-line flags into a single immutable RunConfig
that is passed explicitly to every component.

Settings are read from /etc/syscleaner/config.toml by default.
"""

import signal
import tomllib
import uuid
from datetime import datetime
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from syscleaner.core.paths import (
    DEFAULT_AUDIT_LOG,
    DEFAULT_BACKUP_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_HOME_ROOT,
    DEFAULT_LOG_DIR,
    DEFAULT_ROOT_HOME,
    DEFAULT_TEMP_DIRS,
    get_config_path,
)
from syscleaner.guard.protected import (
    DEFAULT_KEEP_FILES,
    DEFAULT_PROTECTED_PATHS,
    GuardError,
    PathGuard,
)
from syscleaner.policy.models import Mode

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""


class Settings(BaseModel):
    """Tunable settings for a cleanup run.

    Attributes:
        audit_log: Append-only audit log file.
        backup_dir: Parent directory for timestamped backups.
        log_dir: Root of the system log tree.
        home_root: Directory whose entries are user home directories.
        root_home: Home directory of the root user.
        temp_dirs: Temporary directories swept for stale entries.
        disk_usage_threshold: Usage percentage above which the precheck warns.
        temp_max_age_days: Temp entries must be older than this to be removed.
        flush_grace_seconds: Wait after signalling live shells to flush history.
        flush_signal: Signal name sent to live shells before trimming history.
        protected_paths: Hard-protected path patterns.
        keep_files: Single files that are never touched.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    audit_log: Path = DEFAULT_AUDIT_LOG
    backup_dir: Path = DEFAULT_BACKUP_DIR
    log_dir: Path = DEFAULT_LOG_DIR
    home_root: Path = DEFAULT_HOME_ROOT
    root_home: Path = DEFAULT_ROOT_HOME
    temp_dirs: tuple[Path, ...] = DEFAULT_TEMP_DIRS
    disk_usage_threshold: Annotated[
        int,
        Field(ge=1, le=100, description="Disk usage warning threshold in percent"),
    ] = 95
    temp_max_age_days: Annotated[
        int,
        Field(ge=0, description="Minimum age in days before temp entries are removed"),
    ] = 1
    flush_grace_seconds: Annotated[
        float,
        Field(ge=0.0, le=10.0, description="Grace interval after history flush signals"),
    ] = 0.5
    flush_signal: str = "SIGUSR1"
    protected_paths: tuple[str, ...] = DEFAULT_PROTECTED_PATHS
    keep_files: tuple[str, ...] = DEFAULT_KEEP_FILES

    @field_validator("flush_signal")
    @classmethod
    def validate_signal(cls, v: str) -> str:
        """Validate that the flush signal names a real signal."""
        name = v.strip().upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        if not hasattr(signal.Signals, name):
            msg = f"unknown signal '{v}'"
            raise ValueError(msg)
        return name

    @field_validator("protected_paths", "keep_files")
    @classmethod
    def validate_patterns(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate that every pattern is an absolute path."""
        try:
            PathGuard.from_lists(v)
        except GuardError as e:
            raise ValueError(str(e)) from e
        return v

    @property
    def signal_number(self) -> signal.Signals:
        """Flush signal as a signal enum member."""
        return signal.Signals[self.flush_signal]

    def build_guard(self) -> PathGuard:
        """Create the path guard for these settings."""
        return PathGuard.from_lists(self.protected_paths, self.keep_files)


class RunConfig(BaseModel):
    """Immutable configuration for a single run.

    Attributes:
        mode: Selected cleanup mode.
        dry_run: Simulate every action instead of performing it.
        backup: Export logs and root history before cleaning.
        session_id: Unique identifier written to the audit log.
        timestamp: Run start time, also used as the backup directory name.
        settings: Tunable settings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: Mode = Mode.STANDARD
    dry_run: bool = False
    backup: bool = False
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = Field(default_factory=lambda: datetime.now().strftime(TIMESTAMP_FORMAT))
    settings: Settings = Field(default_factory=Settings)

    @property
    def mode_label(self) -> str:
        """Mode name for the banner; dry runs are shown as TEST."""
        return "TEST" if self.dry_run else self.mode.label

    @property
    def backup_path(self) -> Path:
        """Backup directory for this run."""
        return self.settings.backup_dir / self.timestamp


def resolve_mode(stealth: bool = False, stealth_max: bool = False) -> Mode:
    """Resolve the run mode from command-line flags.

    ``--stealth-max`` implies ``--stealth``.
    """
    if stealth_max:
        return Mode.STEALTH_MAX
    if stealth:
        return Mode.STEALTH
    return Mode.STANDARD


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file at the default location yields default settings.
    A missing file that was named explicitly is an error.

    Args:
        path: Explicit settings path. If None, the environment variable
            or the default location is used.

    Returns:
        Validated Settings object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file is missing, unreadable or invalid.
    """
    config_path = get_config_path(path)

    if not config_path.exists():
        if config_path == DEFAULT_CONFIG_PATH:
            return Settings()
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def build_run_config(
    *,
    dry_run: bool = False,
    stealth: bool = False,
    stealth_max: bool = False,
    backup: bool = False,
    config_path: Path | None = None,
) -> RunConfig:
    """Build the RunConfig for a run from flags and the settings file.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    return RunConfig(
        mode=resolve_mode(stealth=stealth, stealth_max=stealth_max),
        dry_run=dry_run,
        backup=backup,
        settings=load_settings(config_path),
    )
