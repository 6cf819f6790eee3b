"""Protocols and abstract interfaces for dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from gh_org_sync.models import OperationResult, Repository, Team


class ForgeClient(Protocol):
    """Protocol for the read queries made against the hosting service"""

    def list_org_repos(self, org: str) -> list[Repository]: ...
    def list_org_teams(self, org: str) -> list[Team]: ...
    def list_team_repos(self, team_id: int) -> list[str]: ...
    def list_team_members(self, team_id: int) -> list[str]: ...
    def current_user_login(self) -> str: ...


class GitRepository(Protocol):
    """Protocol for the git operations used by the update sequence"""

    def default_branch(self, remote: str = 'origin') -> str: ...
    def has_changes(self) -> bool: ...
    def stash_push(self, message: str) -> OperationResult: ...
    def stash_top(self) -> str | None: ...
    def stash_pop(self) -> OperationResult: ...
    def checkout(self, branch: str) -> OperationResult: ...
    def pull(self) -> OperationResult: ...
    def close(self) -> None: ...

    @property
    def path(self) -> Path: ...

    @property
    def current_branch(self) -> str: ...


class OutputHandler(Protocol):
    """Protocol for handling output"""

    def info(self, message: str, indent: int = 0) -> None: ...
    def success(self, message: str, indent: int = 0) -> None: ...
    def warning(self, message: str, indent: int = 0) -> None: ...
    def error(self, message: str, indent: int = 0) -> None: ...
    def section(self, title: str) -> None: ...
    def debug(self, message: str) -> None: ...
