"""OrgSynchronizer: clones and updates the local copies of resolved repositories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError
from tqdm import tqdm

from gh_org_sync.models import (
    OperationResult,
    RepoAction,
    RepoOutcome,
    SyncResult,
    UpdateState,
)
from gh_org_sync.protocols import GitRepository, OutputHandler
from gh_org_sync.repository import GitPythonRepository, clone_repository
from gh_org_sync.updater import RepoUpdater

logger = logging.getLogger(__name__)


class OrgSynchronizer:
    """Responsible for the local clones of one organization"""

    def __init__(
        self,
        org_path: Path,
        output: OutputHandler,
        remote_name: str = 'origin',
        progress: bool = True,
        open_repository: Callable[[Path], GitRepository] = GitPythonRepository,
        clone: Callable[[str, Path], OperationResult] = clone_repository,
    ):
        self.org_path = Path(org_path)
        self.output = output
        self.progress = progress
        self.updater = RepoUpdater(output, remote_name)
        self._open_repository = open_repository
        self._clone = clone

    def ensure_repo_directories_exist(
        self,
        repos: Mapping[str, str],
        repo_paths: Mapping[str, Path],
    ) -> SyncResult:
        """Clone every repository that has no local directory yet."""
        return self.sync(repos, repo_paths, update=False)

    def update_repos(
        self,
        repos: Mapping[str, str],
        repo_paths: Mapping[str, Path],
    ) -> SyncResult:
        """Clone missing repositories and run the update sequence on the others."""
        return self.sync(repos, repo_paths, update=True)

    def sync(
        self,
        repos: Mapping[str, str],
        repo_paths: Mapping[str, Path],
        update: bool = True,
    ) -> SyncResult:
        """Process each repository in turn; one failure never stops the rest."""
        result = SyncResult()
        self.org_path.mkdir(exist_ok=True)

        verb = "Updating" if update else "Checking"
        self.output.info(f"📦 {verb} {len(repo_paths)} repos")

        with tqdm(total=len(repo_paths), desc="Syncing", unit="repo", disable=not self.progress) as pbar:
            for name, path in repo_paths.items():
                pbar.set_postfix_str(name, refresh=True)
                result.add_outcome(self._sync_single_repo(name, repos[name], Path(path), update))
                pbar.update(1)

        return result

    def _sync_single_repo(self, name: str, url: str, path: Path, update: bool) -> RepoOutcome:
        if not path.exists():
            try:
                return self._clone_repo(name, url, path)
            except Exception as e:
                logger.exception("Unexpected error cloning %s", url)
                self.output.error(f"Unexpected error cloning {name}: {e}", indent=1)
                return RepoOutcome(name, str(path), RepoAction.FAILED, details=f"Unexpected error: {e}")
        if not update:
            return RepoOutcome(name, str(path), RepoAction.SKIPPED, details="already cloned")

        self.output.section(f"Updating {name}")
        repo = None
        try:
            repo = self._open_repository(path)
            run = self.updater.update(repo)
        except (InvalidGitRepositoryError, NoSuchPathError):
            self.output.error(f"Not a valid git repository: {path}", indent=1)
            return RepoOutcome(name, str(path), RepoAction.FAILED, details="Invalid git repository")
        except Exception as e:
            logger.exception("Unexpected error updating %s", path)
            self.output.error(f"Unexpected error in {path}: {e}", indent=1)
            return RepoOutcome(name, str(path), RepoAction.FAILED, details=f"Unexpected error: {e}")
        finally:
            if repo is not None:
                repo.close()

        if run.state is UpdateState.FAILED:
            return RepoOutcome(
                name, str(path), RepoAction.UPDATED,
                state=run.state, failed_step=run.failed_step, details=run.message,
            )
        return RepoOutcome(name, str(path), RepoAction.UPDATED, state=run.state)

    def _clone_repo(self, name: str, url: str, path: Path) -> RepoOutcome:
        self.output.info(f"Cloning {name} from {url}")
        result = self._clone(url, path)
        if result.success:
            self.output.success(f"✓ Cloned {name}", indent=1)
            return RepoOutcome(name, str(path), RepoAction.CLONED)
        self.output.error(f"✗ Failed to clone {name}: {result.error or result.message}", indent=1)
        return RepoOutcome(
            name, str(path), RepoAction.FAILED,
            details=f"{result.message}: {result.error}" if result.error else result.message,
        )
