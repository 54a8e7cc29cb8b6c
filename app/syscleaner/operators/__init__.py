"""External collaborators: package managers, services, containers, backups.

This module exports the drivers the campaign invokes as opaque tools.
"""

from syscleaner.operators.backup import BackupExporter
from syscleaner.operators.base import PackageCacheDriver
from syscleaner.operators.container import DockerEngine
from syscleaner.operators.packages import (
    AptDriver,
    DnfDriver,
    FlatpakDriver,
    PacmanDriver,
    SnapDriver,
    get_available_drivers,
    get_drivers,
)
from syscleaner.operators.services import LOGGING_UNITS, ServiceSupervisor

__all__ = [
    "LOGGING_UNITS",
    "AptDriver",
    "BackupExporter",
    "DnfDriver",
    "DockerEngine",
    "FlatpakDriver",
    "PackageCacheDriver",
    "PacmanDriver",
    "ServiceSupervisor",
    "SnapDriver",
    "get_available_drivers",
    "get_drivers",
]
