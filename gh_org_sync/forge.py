"""GitHub REST API client used to list repositories, teams and members."""

from __future__ import annotations

import logging
from typing import Any

import requests

from gh_org_sync.models import Credentials, ExplicitCredentials, Repository, Team

DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_TIMEOUT = 30
PAGE_SIZE = 100

logger = logging.getLogger(__name__)


class ForgeError(Exception):
    """The hosting service rejected a request (auth, rate limit, not found)."""


def _user_agent() -> str:
    from gh_org_sync import __version__

    return f'gh-org-sync/{__version__} (using {requests.utils.default_user_agent()})'


class GitHubClient:
    """Read-only GitHub client over a requests session.

    With no explicit token the session is left to pick up credentials for
    the API host from ``~/.netrc``, which requests does on its own.
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'User-Agent': _user_agent(),
        })
        if token:
            self.session.headers['Authorization'] = f'token {token}'
        self._login: str | None = None

    @classmethod
    def from_credentials(
        cls,
        credentials: Credentials,
        session: requests.Session | None = None,
    ) -> GitHubClient:
        """Build a client for the given credential option.

        Default credentials are verified right away by asking who we are,
        so a missing or stale ~/.netrc entry fails before any listing.
        """
        if isinstance(credentials, ExplicitCredentials):
            params = dict(credentials.params)
            return cls(
                token=params.get('token'),
                api_url=params.get('api_url', DEFAULT_API_URL),
                timeout=params.get('timeout', DEFAULT_TIMEOUT),
                session=session,
            )
        client = cls(session=session)
        client.current_user_login()
        return client

    def _get(self, url: str) -> tuple[Any, dict]:
        """Perform a GET, return deserialized JSON and the parsed Link header."""
        logger.debug("GET %s", url)
        r = self.session.get(url, timeout=self.timeout)
        # GitHub explains client errors (bad credentials, rate limit) in the
        # JSON body; show that instead of a bare status code.
        if 400 <= r.status_code < 500:
            try:
                body = r.json()
            except ValueError:
                body = None
            message = body.get('message', r.reason) if isinstance(body, dict) else r.reason
            raise ForgeError(f"Failed to fetch {url}: {message}")
        r.raise_for_status()
        return r.json(), r.links

    def _get_list(self, path: str) -> list[dict[str, Any]]:
        """Fetch every page of a list endpoint, following rel="next" links."""
        url = f'{self.api_url}{path}?per_page={PAGE_SIZE}'
        items, links = self._get(url)
        while 'next' in links:
            more, links = self._get(links['next']['url'])
            items += more
        return items

    def list_org_repos(self, org: str) -> list[Repository]:
        return [Repository(r['name'], r['html_url']) for r in self._get_list(f'/orgs/{org}/repos')]

    def list_org_teams(self, org: str) -> list[Team]:
        return [Team(t['name'], t['id']) for t in self._get_list(f'/orgs/{org}/teams')]

    def list_team_repos(self, team_id: int) -> list[str]:
        return [r['name'] for r in self._get_list(f'/teams/{team_id}/repos')]

    def list_team_members(self, team_id: int) -> list[str]:
        return [m['login'] for m in self._get_list(f'/teams/{team_id}/members')]

    def current_user_login(self) -> str:
        """Login of the authenticated user (fetched once per client)."""
        if self._login is None:
            data, _links = self._get(f'{self.api_url}/user')
            self._login = data['login']
        return self._login
