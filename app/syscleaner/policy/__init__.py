"""Cleanup policy: run modes, resources, and the mode matrix."""

from syscleaner.policy.matrix import ACTION_TABLE, ModePolicy, PolicyError
from syscleaner.policy.models import (
    ActionKind,
    Mode,
    ResolvedAction,
    Resource,
    ResourceKind,
)

__all__ = [
    "ACTION_TABLE",
    "ActionKind",
    "Mode",
    "ModePolicy",
    "PolicyError",
    "ResolvedAction",
    "Resource",
    "ResourceKind",
]
