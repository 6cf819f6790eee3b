"""Tests for domain models (dataclasses, enums)."""

from datetime import datetime
from pathlib import Path

import pytest

from gh_org_sync import (
    ExplicitCredentials,
    RepoAction,
    RepoOutcome,
    Repository,
    SyncConfig,
    SyncResult,
    Team,
    UpdateState,
    UpdateStep,
    UseDefaultCredentials,
)


class TestRepositoryAndTeam:
    def test_repository_unpacks_as_pair(self):
        name, url = Repository("A", "https://github.com/acme/A")
        assert (name, url) == ("A", "https://github.com/acme/A")

    def test_team_builds_mapping(self):
        assert dict([Team("core", 1), Team("web", 2)]) == {"core": 1, "web": 2}


class TestRepoOutcome:
    def test_failed_action(self):
        assert RepoOutcome("A", "/p", RepoAction.FAILED).failed is True

    def test_failed_update_state(self):
        outcome = RepoOutcome("A", "/p", RepoAction.UPDATED, UpdateState.FAILED, UpdateStep.PULL)
        assert outcome.failed is True

    def test_successful_update(self):
        outcome = RepoOutcome("A", "/p", RepoAction.UPDATED, UpdateState.RESTORED)
        assert outcome.failed is False

    def test_str(self):
        outcome = RepoOutcome("A", "/p", RepoAction.CLONED, timestamp=datetime(2024, 1, 2, 3, 4, 5))
        assert str(outcome) == "[03:04:05] A: cloned"

    def test_frozen(self):
        outcome = RepoOutcome("A", "/p", RepoAction.CLONED)
        with pytest.raises(AttributeError):
            outcome.name = "B"


class TestSyncResult:
    def _result(self) -> SyncResult:
        result = SyncResult()
        result.add_outcome(RepoOutcome("A", "/dev/acme/A", RepoAction.CLONED))
        result.add_outcome(RepoOutcome("B", "/dev/acme/B", RepoAction.UPDATED, UpdateState.RESTORED))
        result.add_outcome(RepoOutcome(
            "C", "/dev/acme/C", RepoAction.UPDATED, UpdateState.FAILED, UpdateStep.PULL, "Pull failed",
        ))
        return result

    def test_empty(self):
        result = SyncResult()
        assert result.repos_processed == 0
        assert result.has_failures() is False

    def test_counts_outcomes(self):
        assert self._result().repos_processed == 3

    def test_filters(self):
        result = self._result()
        assert [o.name for o in result.get_outcomes_by_action(RepoAction.UPDATED)] == ["B", "C"]
        assert [o.name for o in result.failures()] == ["C"]
        assert result.has_failures() is True

    def test_to_dict(self):
        data = self._result().to_dict()

        assert data["repos_processed"] == 3
        assert data["has_failures"] is True
        assert data["repos"][0]["action"] == "CLONED"
        assert data["repos"][0]["state"] is None
        assert data["repos"][2]["state"] == "FAILED"
        assert data["repos"][2]["failed_step"] == "pull"
        assert data["repos"][2]["details"] == "Pull failed"


class TestSyncConfig:
    def test_defaults(self):
        config = SyncConfig(org_name="acme")
        assert config.dev_home == Path.home() / "dev"
        assert config.scope_to_teams is False
        assert config.credentials == UseDefaultCredentials()
        assert config.remote_name == "origin"
        assert config.clone_only is False

    def test_org_path(self):
        assert SyncConfig(org_name="acme", dev_home=Path("/src")).org_path == Path("/src/acme")

    def test_with_updates(self):
        config = SyncConfig(org_name="acme")
        updated = config.with_updates(scope_to_teams=True)
        assert updated.scope_to_teams is True
        assert config.scope_to_teams is False
        assert updated.org_name == "acme"

    def test_credential_options_are_distinct(self):
        assert ExplicitCredentials({"token": "t"}) != UseDefaultCredentials()
        assert ExplicitCredentials().params == {}
