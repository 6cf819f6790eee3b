"""CLI entry point: main() function."""

from __future__ import annotations

import json
import logging
import sys

import requests
from colorama import Fore, Style

from gh_org_sync.config import parse_config
from gh_org_sync.forge import ForgeError
from gh_org_sync.models import ConfigurationError
from gh_org_sync.orchestrator import OrgSyncOrchestrator
from gh_org_sync.output import ConsoleOutputHandler, NullOutputHandler
from gh_org_sync.reporter import SummaryReporter


def main(argv: list[str] | None = None):
    """Main entry point"""
    try:
        args, config = parse_config(argv)
    except ConfigurationError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if config.json_output:
        output = NullOutputHandler()
    else:
        output = ConsoleOutputHandler(verbose=config.verbose, color=config.color and sys.stdout.isatty())

    try:
        orchestrator = OrgSyncOrchestrator(config, output, progress=not config.json_output)
    except ConfigurationError as e:
        if config.json_output:
            print(json.dumps({'error': str(e)}, indent=2))
        else:
            output.error(f"Error: {e}")
        sys.exit(2)

    try:
        if args.list_only:
            repos, repo_paths = orchestrator.repos, orchestrator.repo_paths
            if config.json_output:
                print(json.dumps(
                    {name: {'url': url, 'path': str(repo_paths[name])} for name, url in repos.items()},
                    indent=2,
                ))
            else:
                SummaryReporter(output).print_repo_list(repos, repo_paths)
            sys.exit(0)

        result = orchestrator.update_repos()

        if config.json_output:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            SummaryReporter(output).print_summary(result, config)

        sys.exit(1 if result.has_failures() else 0)

    except KeyboardInterrupt:
        if not config.json_output:
            output.warning("\n\nInterrupted by user")
        sys.exit(130)
    except (ForgeError, requests.RequestException) as e:
        if config.json_output:
            print(json.dumps({'error': str(e)}, indent=2))
        else:
            output.error(f"\nGitHub API error: {e}")
        sys.exit(1)
    except Exception as e:
        if config.json_output:
            print(json.dumps({'error': str(e)}, indent=2))
        else:
            output.error(f"\nUnexpected error: {e}")
            if config.verbose:
                import traceback
                traceback.print_exc()
        sys.exit(1)
