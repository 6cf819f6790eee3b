"""OrgSyncOrchestrator: wires the API client, scope resolver and synchronizer."""

from __future__ import annotations

from pathlib import Path

from gh_org_sync.forge import GitHubClient
from gh_org_sync.models import ConfigurationError, SyncConfig, SyncResult
from gh_org_sync.protocols import ForgeClient, OutputHandler
from gh_org_sync.resolver import ScopeResolver
from gh_org_sync.synchronizer import OrgSynchronizer


class OrgSyncOrchestrator:
    """Main orchestrator - one organization, one run"""

    def __init__(
        self,
        config: SyncConfig,
        output: OutputHandler,
        client: ForgeClient | None = None,
        progress: bool = True,
    ):
        """Validate the configuration; fails before any network access.

        Raises:
            ConfigurationError: if config.dev_home is not an existing directory.
        """
        dev_home = Path(config.dev_home).expanduser()
        if not dev_home.is_dir():
            raise ConfigurationError(f"Directory does not exist: {dev_home}")

        self.config = config.with_updates(dev_home=dev_home)
        self.output = output
        self._client = client
        self._resolver: ScopeResolver | None = None
        self.synchronizer = OrgSynchronizer(
            self.config.org_path, output,
            remote_name=self.config.remote_name,
            progress=progress,
        )

    @property
    def client(self) -> ForgeClient:
        if self._client is None:
            self._client = GitHubClient.from_credentials(self.config.credentials)
        return self._client

    @property
    def resolver(self) -> ScopeResolver:
        if self._resolver is None:
            self._resolver = ScopeResolver(
                self.client,
                self.config.org_name,
                self.config.dev_home,
                scope_to_teams=self.config.scope_to_teams,
            )
        return self._resolver

    @property
    def repos(self) -> dict[str, str]:
        return self.resolver.repos

    @property
    def repo_paths(self) -> dict[str, Path]:
        return self.resolver.repo_paths

    def reset(self) -> None:
        """Drop every memoized API result so the next read fetches again."""
        self.resolver.invalidate()

    def ensure_repo_directories_exist(self) -> SyncResult:
        """Make sure every resolved repository is cloned on this machine."""
        return self.synchronizer.ensure_repo_directories_exist(self.repos, self.repo_paths)

    def update_repos(self) -> SyncResult:
        """Clone what is missing, then update every other resolved repository."""
        if self.config.clone_only:
            return self.ensure_repo_directories_exist()
        return self.synchronizer.update_repos(self.repos, self.repo_paths)
