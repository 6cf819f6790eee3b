"""Domain models: enums, dataclasses, and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, NamedTuple

DEFAULT_DEV_HOME = Path.home() / "dev"


class ConfigurationError(Exception):
    """Invalid local configuration (e.g. a missing development root)."""


class OperationType(Enum):
    """Types of git operations"""
    CLONE = auto()
    CHECKOUT = auto()
    PULL = auto()
    STASH = auto()


class UpdateState(Enum):
    """States of the per-repository update sequence"""
    CLEAN = auto()
    STASHED = auto()
    ON_DEFAULT = auto()
    PULLED = auto()
    RESTORED = auto()
    FAILED = auto()


class UpdateStep(Enum):
    """Steps of the update sequence, used to report where it stopped"""
    DETECT = "detect"
    STASH = "stash"
    CHECKOUT_DEFAULT = "checkout default branch"
    PULL = "pull"
    CHECKOUT_PREVIOUS = "return to previous branch"
    STASH_POP = "pop stash"


class RepoAction(Enum):
    """What the synchronizer did with a repository"""
    CLONED = auto()
    UPDATED = auto()
    SKIPPED = auto()
    FAILED = auto()


class Repository(NamedTuple):
    """A repository of the organization, unpackable as a (name, url) pair"""
    name: str
    url: str


class Team(NamedTuple):
    """A team of the organization, unpackable as a (name, id) pair"""
    name: str
    id: int


@dataclass(frozen=True)
class ScopeSelection:
    """Whether scoping is active (all=False) and for which login"""
    all: bool
    user_login: str | None = None


@dataclass(frozen=True)
class UseDefaultCredentials:
    """Authenticate with the local credential file (~/.netrc)."""


@dataclass(frozen=True)
class ExplicitCredentials:
    """Authenticate with explicit connection parameters.

    Recognized keys are ``token``, ``api_url`` and ``timeout``.
    """
    params: dict[str, Any] = field(default_factory=dict)


Credentials = UseDefaultCredentials | ExplicitCredentials


@dataclass(frozen=True)
class OperationResult:
    """Result of a single git operation"""
    success: bool
    operation: OperationType
    message: str
    error: Exception | None = None


@dataclass(frozen=True)
class RepoOutcome:
    """Immutable record of what happened to one repository"""
    name: str
    path: str
    action: RepoAction
    state: UpdateState | None = None
    failed_step: UpdateStep | None = None
    details: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def failed(self) -> bool:
        return self.action is RepoAction.FAILED or self.state is UpdateState.FAILED

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.name}: {self.details or self.action.name.lower()}"


@dataclass
class SyncResult:
    """Mutable result accumulator"""
    repos_processed: int = 0
    outcomes: list[RepoOutcome] = field(default_factory=list)

    def add_outcome(self, outcome: RepoOutcome) -> None:
        """Record the outcome of processing one repository."""
        self.outcomes.append(outcome)
        self.repos_processed += 1

    def get_outcomes_by_action(self, action: RepoAction) -> list[RepoOutcome]:
        """Filter outcomes by action (e.g. CLONED, UPDATED)."""
        return [o for o in self.outcomes if o.action is action]

    def failures(self) -> list[RepoOutcome]:
        """Return every outcome where a clone or update step failed."""
        return [o for o in self.outcomes if o.failed]

    def has_failures(self) -> bool:
        return any(o.failed for o in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'repos_processed': self.repos_processed,
            'repos': [
                {
                    'name': o.name,
                    'path': o.path,
                    'action': o.action.name,
                    'state': o.state.name if o.state else None,
                    'failed_step': o.failed_step.value if o.failed_step else None,
                    'details': o.details,
                    'timestamp': o.timestamp.isoformat(),
                }
                for o in self.outcomes
            ],
            'has_failures': self.has_failures(),
        }


@dataclass(frozen=True)
class SyncConfig:
    """Configuration for a sync run"""
    org_name: str
    dev_home: Path = DEFAULT_DEV_HOME
    scope_to_teams: bool = False
    credentials: Credentials = field(default_factory=UseDefaultCredentials)
    remote_name: str = 'origin'
    clone_only: bool = False
    verbose: bool = False
    json_output: bool = False
    color: bool = True

    @property
    def org_path(self) -> Path:
        return Path(self.dev_home) / self.org_name

    def with_updates(self, **kwargs) -> SyncConfig:
        """Return a new SyncConfig with the given fields replaced."""
        current = {f.name: getattr(self, f.name) for f in self.__dataclass_fields__.values()}
        current.update(kwargs)
        return SyncConfig(**current)
