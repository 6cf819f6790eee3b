"""Shared fakes and fixtures."""

from __future__ import annotations

import pytest

from gh_org_sync import Repository, Team


class FakeForgeClient:
    """In-memory organization data; records every call it receives."""

    def __init__(
        self,
        repos: dict[str, str],
        teams: dict[str, int] | None = None,
        team_repos: dict[int, list[str]] | None = None,
        team_members: dict[int, list[str]] | None = None,
        login: str = "alice",
    ):
        self.repos = dict(repos)
        self.teams = dict(teams or {})
        self.team_repos = dict(team_repos or {})
        self.team_members = dict(team_members or {})
        self.login = login
        self.calls: list[tuple] = []
        self.fail_on: str | None = None

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_on == call[0]:
            raise RuntimeError(f"{call[0]} exploded")

    def list_org_repos(self, org: str) -> list[Repository]:
        self._record("list_org_repos", org)
        return [Repository(name, url) for name, url in self.repos.items()]

    def list_org_teams(self, org: str) -> list[Team]:
        self._record("list_org_teams", org)
        return [Team(name, team_id) for name, team_id in self.teams.items()]

    def list_team_repos(self, team_id: int) -> list[str]:
        self._record("list_team_repos", team_id)
        return list(self.team_repos.get(team_id, []))

    def list_team_members(self, team_id: int) -> list[str]:
        self._record("list_team_members", team_id)
        return list(self.team_members.get(team_id, []))

    def current_user_login(self) -> str:
        self._record("current_user_login")
        return self.login

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def scenario_client() -> FakeForgeClient:
    """A, B, C; t1 owns A,B (alice, bob); t2 owns B,C (carol); user alice."""
    return FakeForgeClient(
        repos={"A": "urlA", "B": "urlB", "C": "urlC"},
        teams={"t1": 1, "t2": 2},
        team_repos={1: ["A", "B"], 2: ["B", "C"]},
        team_members={1: ["alice", "bob"], 2: ["carol"]},
        login="alice",
    )


@pytest.fixture
def git_identity(monkeypatch):
    """Give git an author/committer so stashes and commits work anywhere."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")
