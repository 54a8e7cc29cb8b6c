"""Data structures for shell history reconciliation."""

from dataclasses import dataclass, field

from syscleaner.core.executor import ActionOutcome
from syscleaner.policy.models import ResourceKind

# Written when a history file is empty so it keeps a valid structure.
EMPTY_HISTORY_PLACEHOLDER = b"# Empty history\n"


@dataclass(frozen=True, slots=True)
class HistoryFileSpec:
    """A canonical shell history file inside a home directory.

    Attributes:
        filename: File name relative to the home directory.
        kind: Resource kind used for the policy lookup.
        shells: Process names of the shells writing this file.
        signal_flush: Whether those shells can be asked to flush by signal.
            Interactive bash has no handler for the flush signal and would
            be terminated by it.
    """

    filename: str
    kind: ResourceKind
    shells: frozenset[str]
    signal_flush: bool = True


HISTORY_FILES: tuple[HistoryFileSpec, ...] = (
    HistoryFileSpec(
        ".bash_history", ResourceKind.BASH_HISTORY, frozenset({"bash"}), signal_flush=False
    ),
    HistoryFileSpec(".zsh_history", ResourceKind.EXTENDED_HISTORY, frozenset({"zsh"})),
    HistoryFileSpec(".zhistory", ResourceKind.EXTENDED_HISTORY, frozenset({"zsh"})),
)


@dataclass(frozen=True, slots=True)
class HistorySession:
    """A live interactive shell believed to write a history file.

    Attributes:
        pid: Process id.
        user: Owning user name.
        terminal: Controlling terminal device, if resolvable.
    """

    pid: int
    user: str
    terminal: str | None = None


@dataclass(slots=True)
class FlushResult:
    """Outcome of a best-effort history flush pass.

    A flush can never be confirmed: the shells write asynchronously
    and report nothing back.

    Attributes:
        sessions: Sessions that were asked to flush.
        signalled: Pids the signal was actually delivered to.
        outcomes: Executor outcomes for each signal command.
        confirmed: Always False.
    """

    sessions: list[HistorySession]
    signalled: list[int] = field(default_factory=list)
    outcomes: list[ActionOutcome] = field(default_factory=list)
    confirmed: bool = False
