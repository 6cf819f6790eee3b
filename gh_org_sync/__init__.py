"""
gh-org-sync: GitHub Organization Sync Tool

Discovers the repositories of a GitHub organization (optionally only those
owned by your teams), clones the missing ones under ~/dev/<org>, and updates
each clone on its default branch while keeping local work in place.
"""

from colorama import init as colorama_init

colorama_init(autoreset=True)

__version__ = "0.2.0"

# Re-export public API so `from gh_org_sync import X` keeps working.
from gh_org_sync.cli import main  # noqa: E402
from gh_org_sync.config import (  # noqa: E402
    build_config,
    create_argument_parser,
    load_config_file,
    parse_config,
)
from gh_org_sync.forge import ForgeError, GitHubClient  # noqa: E402
from gh_org_sync.models import (  # noqa: E402
    ConfigurationError,
    ExplicitCredentials,
    OperationResult,
    OperationType,
    RepoAction,
    RepoOutcome,
    Repository,
    ScopeSelection,
    SyncConfig,
    SyncResult,
    Team,
    UpdateState,
    UpdateStep,
    UseDefaultCredentials,
)
from gh_org_sync.orchestrator import OrgSyncOrchestrator  # noqa: E402
from gh_org_sync.output import (  # noqa: E402
    SECTION_WIDTH,
    ConsoleOutputHandler,
    NullOutputHandler,
)
from gh_org_sync.protocols import ForgeClient, GitRepository, OutputHandler  # noqa: E402
from gh_org_sync.reporter import SummaryReporter  # noqa: E402
from gh_org_sync.repository import GitPythonRepository, clone_repository  # noqa: E402
from gh_org_sync.resolver import (  # noqa: E402
    ScopeResolver,
    ScopeSnapshot,
    collect_repo_names,
    derive_repo_paths,
    find_my_teams,
    resolve_repos,
)
from gh_org_sync.synchronizer import OrgSynchronizer  # noqa: E402
from gh_org_sync.updater import RepoUpdater, UpdateRun  # noqa: E402

__all__ = [
    "__version__",
    # Models
    "ConfigurationError",
    "ExplicitCredentials",
    "OperationResult",
    "OperationType",
    "RepoAction",
    "RepoOutcome",
    "Repository",
    "ScopeSelection",
    "SyncConfig",
    "SyncResult",
    "Team",
    "UpdateState",
    "UpdateStep",
    "UseDefaultCredentials",
    # Protocols
    "ForgeClient",
    "GitRepository",
    "OutputHandler",
    # Implementations
    "ForgeError",
    "GitHubClient",
    "GitPythonRepository",
    "clone_repository",
    "ConsoleOutputHandler",
    "NullOutputHandler",
    "SECTION_WIDTH",
    # Scope resolution
    "ScopeResolver",
    "ScopeSnapshot",
    "collect_repo_names",
    "derive_repo_paths",
    "find_my_teams",
    "resolve_repos",
    # Services
    "OrgSynchronizer",
    "OrgSyncOrchestrator",
    "RepoUpdater",
    "UpdateRun",
    "SummaryReporter",
    # Config / CLI
    "build_config",
    "create_argument_parser",
    "load_config_file",
    "parse_config",
    "main",
]
