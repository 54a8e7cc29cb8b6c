"""Default system paths used by syscleaner.

All of these can be overridden from the settings file.
"""

import os
from pathlib import Path

# Application identifier for directory and file naming
APP_NAME = "syscleaner"

CONFIG_ENV_VAR = "SYSCLEANER_CONFIG"
DEFAULT_CONFIG_PATH = Path("/etc") / APP_NAME / "config.toml"

DEFAULT_AUDIT_LOG = Path("/var/log/system-cleaner-audit.log")
DEFAULT_BACKUP_DIR = Path("/var/backups/system-cleaner")
DEFAULT_LOG_DIR = Path("/var/log")
DEFAULT_HOME_ROOT = Path("/home")
DEFAULT_ROOT_HOME = Path("/root")
DEFAULT_TEMP_DIRS: tuple[Path, ...] = (Path("/tmp"), Path("/var/tmp"))

JOURNAL_DIRS: tuple[Path, ...] = (Path("/var/log/journal"), Path("/run/log/journal"))
SYSTEMD_RUNTIME_DIR = Path("/run/systemd/system")
DROP_CACHES_PATH = Path("/proc/sys/vm/drop_caches")


def get_config_path(override: Path | None = None) -> Path:
    """Get the settings file path.

    Resolution order: explicit override, the SYSCLEANER_CONFIG
    environment variable, then /etc/syscleaner/config.toml.

    Args:
        override: Path given on the command line, if any.

    Returns:
        Path to the settings file (which may not exist).
    """
    if override is not None:
        return override
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH
