"""Concrete GitPython-based repository implementation."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from git import GitCommandError, Repo

from gh_org_sync.models import OperationResult, OperationType

FALLBACK_DEFAULT_BRANCH = 'main'

logger = logging.getLogger(__name__)


def clone_repository(url: str, path: Path) -> OperationResult:
    """Clone url into path. The parent directory must already exist."""
    try:
        repo = Repo.clone_from(url, str(path))
        repo.close()
        return OperationResult(True, OperationType.CLONE, f"Cloned {url}")
    except GitCommandError as e:
        logger.warning("git clone %s failed: %s", url, e)
        return OperationResult(False, OperationType.CLONE, "Clone failed", e)


class GitPythonRepository:
    """Concrete implementation using GitPython"""

    def __init__(self, repo_path: Path):
        """Open a git repository at the given path."""
        self._path = repo_path
        self._repo = Repo(repo_path)

    def close(self) -> None:
        """Release underlying git resources."""
        self._repo.close()

    @property
    def path(self) -> Path:
        """Absolute path to the repository root."""
        return self._path

    @property
    def current_branch(self) -> str:
        """Checked-out branch name, or the commit hash when HEAD is detached."""
        if self._repo.head.is_detached:
            return self._repo.head.commit.hexsha
        return self._repo.active_branch.name

    def default_branch(self, remote: str = 'origin') -> str:
        """Branch the remote's HEAD points at, falling back to 'main'.

        The fallback covers clones where refs/remotes/<remote>/HEAD was never
        set (e.g. the remote was added by hand).
        """
        try:
            ref = self._repo.git.symbolic_ref(f'refs/remotes/{remote}/HEAD')
        except GitCommandError:
            ref = ''
        branch = posixpath.basename(ref.strip())
        if not branch:
            logger.debug("%s: no %s/HEAD, assuming %s", self._path, remote, FALLBACK_DEFAULT_BRANCH)
            return FALLBACK_DEFAULT_BRANCH
        return branch

    def has_changes(self) -> bool:
        """Return True if tracked files have staged or unstaged changes.

        Submodule working trees are ignored: `git stash` does not save them.
        """
        return self._repo.is_dirty(untracked_files=False, submodules=False)

    def checkout(self, branch: str) -> OperationResult:
        """Check out a branch (or commit) by name."""
        try:
            self._repo.git.checkout(branch)
            return OperationResult(True, OperationType.CHECKOUT, f"Checked out {branch}")
        except GitCommandError as e:
            return OperationResult(False, OperationType.CHECKOUT, "Checkout failed", e)

    def pull(self) -> OperationResult:
        """Pull the checked-out branch from its upstream."""
        try:
            self._repo.git.pull()
            return OperationResult(True, OperationType.PULL, "Pulled")
        except GitCommandError as e:
            return OperationResult(False, OperationType.PULL, "Pull failed", e)

    def stash_push(self, message: str) -> OperationResult:
        """Stash working tree changes with a descriptive message."""
        try:
            self._repo.git.stash('push', '-m', message)
            return OperationResult(True, OperationType.STASH, f"Stashed changes: {message}")
        except GitCommandError as e:
            return OperationResult(False, OperationType.STASH, "Stash failed", e)

    def stash_top(self) -> str | None:
        """Return the commit of the newest stash entry, or None if there is none."""
        try:
            return self._repo.git.rev_parse('-q', '--verify', 'refs/stash') or None
        except GitCommandError:
            return None

    def stash_pop(self) -> OperationResult:
        """Pop the most recent stash entry and apply it."""
        try:
            self._repo.git.stash('pop')
            return OperationResult(True, OperationType.STASH, "Popped stash")
        except GitCommandError as e:
            return OperationResult(False, OperationType.STASH, "Stash pop failed", e)
