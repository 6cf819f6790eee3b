"""Scope resolution: which organization repositories this run works on."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from gh_org_sync.models import ScopeSelection
from gh_org_sync.protocols import ForgeClient

logger = logging.getLogger(__name__)


def find_my_teams(team_members: Mapping[str, Iterable[str]], user_login: str) -> frozenset[str]:
    """Names of the teams whose member set contains user_login."""
    return frozenset(team for team, members in team_members.items() if user_login in members)


def collect_repo_names(team_repos: Mapping[str, Iterable[str]], teams: Iterable[str]) -> frozenset[str]:
    """Union of the repositories owned by the given teams."""
    names: set[str] = set()
    for team in teams:
        names.update(team_repos.get(team, ()))
    return frozenset(names)


def resolve_repos(
    all_repos: Mapping[str, str],
    team_repos: Mapping[str, Iterable[str]],
    team_members: Mapping[str, Iterable[str]],
    user_login: str | None,
    scope_to_teams: bool,
) -> dict[str, str]:
    """Filter all_repos down to the repositories visible to this run.

    Unscoped, this is all_repos itself. Scoped, it keeps the repositories
    owned by at least one team user_login belongs to; names a team lists
    that are not in all_repos are dropped.
    """
    if not scope_to_teams:
        return dict(all_repos)
    my_repo_names = collect_repo_names(team_repos, find_my_teams(team_members, user_login))
    return {name: url for name, url in all_repos.items() if name in my_repo_names}


def derive_repo_paths(repos: Mapping[str, str], dev_home: Path, org_name: str) -> dict[str, Path]:
    """Map each repository name to dev_home/org_name/name."""
    org_path = Path(dev_home) / org_name
    return {name: org_path / name for name in repos}


@dataclass(frozen=True)
class ScopeSnapshot:
    """Every value derived from one round of API reads.

    Team fields are None when the snapshot was built without team data
    (unscoped runs never pay for those calls).
    """
    selection: ScopeSelection
    all_repos: dict[str, str]
    repos: dict[str, str]
    repo_paths: dict[str, Path]
    org_teams: dict[str, int] | None = None
    team_repos: dict[str, frozenset[str]] | None = None
    team_members: dict[str, frozenset[str]] | None = None
    my_teams: frozenset[str] | None = None
    my_repo_names: frozenset[str] | None = None

    @property
    def has_team_data(self) -> bool:
        return self.org_teams is not None


class ScopeResolver:
    """Builds and memoizes a ScopeSnapshot for one organization"""

    def __init__(
        self,
        client: ForgeClient,
        org_name: str,
        dev_home: Path,
        scope_to_teams: bool = False,
    ):
        """Create a resolver; nothing is fetched until a value is read."""
        self.client = client
        self.org_name = org_name
        self.dev_home = Path(dev_home)
        self.scope_to_teams = scope_to_teams
        self._snapshot: ScopeSnapshot | None = None

    def build(self, include_teams: bool | None = None) -> ScopeSnapshot:
        """Fetch everything needed and return a complete snapshot.

        The memoized snapshot is only replaced once every fetch succeeded,
        so a failing API call never leaves half of the values updated.
        """
        if include_teams is None:
            include_teams = self.scope_to_teams

        all_repos = dict(self.client.list_org_repos(self.org_name))
        logger.debug("Organization %s has %d repositories", self.org_name, len(all_repos))

        if not include_teams:
            snapshot = ScopeSnapshot(
                selection=ScopeSelection(all=True),
                all_repos=all_repos,
                repos=dict(all_repos),
                repo_paths=derive_repo_paths(all_repos, self.dev_home, self.org_name),
            )
            self._snapshot = snapshot
            return snapshot

        user_login = self.client.current_user_login()
        org_teams = dict(self.client.list_org_teams(self.org_name))
        team_repos = {
            name: frozenset(self.client.list_team_repos(team_id))
            for name, team_id in org_teams.items()
        }
        team_members = {
            name: frozenset(self.client.list_team_members(team_id))
            for name, team_id in org_teams.items()
        }
        my_teams = find_my_teams(team_members, user_login)
        my_repo_names = collect_repo_names(team_repos, my_teams)
        repos = resolve_repos(all_repos, team_repos, team_members, user_login, self.scope_to_teams)
        logger.debug(
            "%s is on %d of %d teams owning %d repositories",
            user_login, len(my_teams), len(org_teams), len(my_repo_names),
        )

        snapshot = ScopeSnapshot(
            selection=ScopeSelection(all=not self.scope_to_teams, user_login=user_login),
            all_repos=all_repos,
            repos=repos,
            repo_paths=derive_repo_paths(repos, self.dev_home, self.org_name),
            org_teams=org_teams,
            team_repos=team_repos,
            team_members=team_members,
            my_teams=my_teams,
            my_repo_names=my_repo_names,
        )
        self._snapshot = snapshot
        return snapshot

    def invalidate(self) -> None:
        """Forget every memoized value at once."""
        self._snapshot = None

    @property
    def snapshot(self) -> ScopeSnapshot:
        if self._snapshot is None:
            return self.build()
        return self._snapshot

    def _team_snapshot(self) -> ScopeSnapshot:
        snapshot = self.snapshot
        if not snapshot.has_team_data:
            snapshot = self.build(include_teams=True)
        return snapshot

    @property
    def selection(self) -> ScopeSelection:
        return self.snapshot.selection

    @property
    def all_repos(self) -> dict[str, str]:
        return self.snapshot.all_repos

    @property
    def repos(self) -> dict[str, str]:
        return self.snapshot.repos

    @property
    def repo_paths(self) -> dict[str, Path]:
        return self.snapshot.repo_paths

    @property
    def org_teams(self) -> dict[str, int]:
        return self._team_snapshot().org_teams

    @property
    def team_repos(self) -> dict[str, frozenset[str]]:
        return self._team_snapshot().team_repos

    @property
    def team_members(self) -> dict[str, frozenset[str]]:
        return self._team_snapshot().team_members

    @property
    def my_teams(self) -> frozenset[str]:
        return self._team_snapshot().my_teams

    @property
    def my_repo_names(self) -> frozenset[str]:
        return self._team_snapshot().my_repo_names
