"""SummaryReporter: generates and displays the final report."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from gh_org_sync.models import RepoAction, RepoOutcome, SyncConfig, SyncResult, UpdateStep
from gh_org_sync.output import SECTION_WIDTH
from gh_org_sync.protocols import OutputHandler


class SummaryReporter:
    """Generates and displays summary reports"""

    def __init__(self, output: OutputHandler):
        self.output = output

    def print_repo_list(self, repos: Mapping[str, str], repo_paths: Mapping[str, Path]):
        """Print the resolved repositories with their URL and local path."""
        self.output.section(f"{len(repos)} repositories")
        for name in sorted(repos):
            self.output.info(f"{name}")
            self.output.info(f"↳ {repos[name]}", indent=1)
            self.output.info(f"↳ {repo_paths[name]}", indent=1)

    def print_summary(self, result: SyncResult, config: SyncConfig):
        """Print the final summary report with per-repository failures."""
        self.output.section("╔" + "=" * SECTION_WIDTH + "╗")
        self.output.info("║" + "SUMMARY REPORT".center(SECTION_WIDTH) + "║")
        self.output.info("╚" + "=" * SECTION_WIDTH + "╝")
        self.output.info("")
        self.output.info(f"Organization: {config.org_name}"
                         + (" (my teams only)" if config.scope_to_teams else ""))
        self.output.info(f"Total repositories processed: {result.repos_processed}")
        self.output.info("")

        cloned = result.get_outcomes_by_action(RepoAction.CLONED)
        updated = [o for o in result.get_outcomes_by_action(RepoAction.UPDATED) if not o.failed]
        if cloned:
            self.output.info(f"Cloned {len(cloned)} repo(s)")
        if updated:
            self.output.info(f"Updated {len(updated)} repo(s)")

        failures = result.failures()
        if failures:
            self._print_failures(failures)
        else:
            self.output.success("✅ ALL REPOSITORIES ARE IN SYNC!")

        self.output.info("")
        self.output.info("=" * SECTION_WIDTH)

    def _print_failures(self, failures: list[RepoOutcome]):
        self.output.info("")
        self.output.warning("⚠️  ATTENTION REQUIRED")
        self.output.info("")
        self.output.info(f"🔴 FAILED REPOSITORIES ({len(failures)}):")
        self.output.info("-" * SECTION_WIDTH)
        for outcome in failures:
            self.output.info(f"  📁 {outcome.path}")
            if outcome.failed_step:
                self.output.info(f"     ↳ {outcome.failed_step.value}: {outcome.details}")
            else:
                self.output.info(f"     ↳ {outcome.details}")

        stranded = [o for o in failures if o.failed_step in (
            UpdateStep.CHECKOUT_DEFAULT, UpdateStep.PULL,
            UpdateStep.CHECKOUT_PREVIOUS, UpdateStep.STASH_POP,
        )]
        if stranded:
            self.output.info("")
            self.output.info("💡 These clones may be on another branch or hold a stash:")
            for outcome in stranded:
                self.output.info(f"• cd '{outcome.path}' && git status && git stash list")
