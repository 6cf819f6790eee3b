"""RepoUpdater: the stash, checkout, pull, restore sequence for one clone."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from gh_org_sync.models import OperationResult, UpdateState, UpdateStep
from gh_org_sync.output import SECTION_WIDTH
from gh_org_sync.protocols import GitRepository, OutputHandler

logger = logging.getLogger(__name__)


@dataclass
class UpdateRun:
    """Progress of one update sequence"""
    state: UpdateState = UpdateState.CLEAN
    failed_step: UpdateStep | None = None
    default_branch: str | None = None
    previous_branch: str | None = None
    stash_message: str | None = None
    message: str = ""
    history: list[UpdateState] = field(default_factory=list)

    @property
    def on_default(self) -> bool:
        return self.previous_branch == self.default_branch

    def advance(self, state: UpdateState) -> None:
        self.history.append(state)
        self.state = state

    def fail(self, step: UpdateStep, message: str) -> None:
        self.history.append(UpdateState.FAILED)
        self.state = UpdateState.FAILED
        self.failed_step = step
        self.message = message


class RepoUpdater:
    """Runs the fixed update sequence and reports where it ended.

    The sequence stops at the first failing step and leaves the clone as git
    left it; the returned run names the step so it can be fixed by hand.
    """

    def __init__(self, output: OutputHandler, remote_name: str = 'origin'):
        self.output = output
        self.remote_name = remote_name

    def update(self, repo: GitRepository) -> UpdateRun:
        run = UpdateRun()

        try:
            run.default_branch = repo.default_branch(self.remote_name)
            run.previous_branch = repo.current_branch
            dirty = repo.has_changes()
        except Exception as e:
            run.fail(UpdateStep.DETECT, f"Could not inspect repository: {e}")
            self._report_failure(repo, run)
            return run

        if dirty:
            timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            stash_message = f"gh-org-sync-{timestamp}"
            stash_before = repo.stash_top()
            self.output.info("Stashing local changes", indent=1)
            if not self._step(repo, run, UpdateStep.STASH, repo.stash_push(stash_message)):
                return run
            # Only pop later if the push created an entry; otherwise the pop
            # would apply an older stash that belongs to the user.
            if repo.stash_top() != stash_before:
                run.stash_message = stash_message
                run.advance(UpdateState.STASHED)
            else:
                logger.debug("%s: stash saved nothing, continuing as clean", repo.path)
                run.advance(UpdateState.CLEAN)
        else:
            run.advance(UpdateState.CLEAN)

        if not run.on_default:
            self.output.info(f"Checking out {run.default_branch}", indent=1)
            if not self._step(repo, run, UpdateStep.CHECKOUT_DEFAULT, repo.checkout(run.default_branch)):
                return run
            run.advance(UpdateState.ON_DEFAULT)

        self.output.info("Pulling changes", indent=1)
        if not self._step(repo, run, UpdateStep.PULL, repo.pull()):
            return run
        run.advance(UpdateState.PULLED)

        if not run.on_default:
            self.output.info(f"Returning to previous branch {run.previous_branch}", indent=1)
            if not self._step(repo, run, UpdateStep.CHECKOUT_PREVIOUS, repo.checkout(run.previous_branch)):
                return run

        if run.stash_message:
            self.output.info("Popping stash", indent=1)
            if not self._step(repo, run, UpdateStep.STASH_POP, repo.stash_pop()):
                return run

        run.advance(UpdateState.RESTORED)
        self.output.success("✓ Up to date", indent=1)
        return run

    def _step(self, repo: GitRepository, run: UpdateRun, step: UpdateStep, result: OperationResult) -> bool:
        if result.success:
            return True
        detail = f"{result.message}: {result.error}" if result.error else result.message
        run.fail(step, detail)
        self._report_failure(repo, run)
        return False

    def _report_failure(self, repo: GitRepository, run: UpdateRun) -> None:
        """Log the failed step and print what is left to undo by hand."""
        logger.warning("%s: %s failed: %s", repo.path, run.failed_step.value, run.message)
        self.output.error(f"✗ {run.failed_step.value} failed: {run.message}", indent=1)

        hints = []
        if run.stash_message and run.failed_step is not UpdateStep.STASH:
            hints.append(f"git stash list  # look for '{run.stash_message}'")
        if not run.on_default and run.failed_step in (UpdateStep.PULL, UpdateStep.CHECKOUT_PREVIOUS):
            hints.append(f"git checkout {run.previous_branch}")
        if not hints:
            return
        self.output.info("━" * SECTION_WIDTH, indent=1)
        self.output.info("To restore the previous state:", indent=1)
        self.output.info(f"  cd '{repo.path}'", indent=1)
        for hint in hints:
            self.output.info(f"  {hint}", indent=1)
        self.output.info("━" * SECTION_WIDTH, indent=1)
