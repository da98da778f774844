"""
PM Bot - GitHub Client
Thin wrapper around the GitHub REST API for the issue and commit calls the bot needs.
"""

from datetime import datetime, timezone

import requests

from config import GITHUB_API_URL, GITHUB_PAT, GITHUB_OWNER, GITHUB_REPO, ISSUE_BODY, log
from errors import ConfigurationError, TrackerApiError

ISSUE_STATES = ("open", "closed")


class GitHubTracker:
    """Issue tracker backed by one GitHub repository."""

    def __init__(self, token=GITHUB_PAT, owner=GITHUB_OWNER, repo=GITHUB_REPO, api_url=GITHUB_API_URL):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")

    @property
    def full_name(self):
        return f"{self.owner}/{self.repo}"

    def ensure_configured(self):
        """Raise ConfigurationError before any HTTP call if a setting is missing."""
        if not self.token:
            raise ConfigurationError(
                "GitHub PAT (Personal Access Token) is not configured. Cannot perform GitHub operations."
            )
        if not self.owner or not self.repo:
            raise ConfigurationError(
                "GITHUB_OWNER or GITHUB_REPO is not configured. Cannot perform GitHub operations."
            )

    def _headers(self):
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _request(self, method, path_or_url, payload=None, params=None):
        """Send one request and return the response, raising TrackerApiError on failure."""
        self.ensure_configured()
        url = path_or_url if path_or_url.startswith("http") else f"{self.api_url}{path_or_url}"
        try:
            r = requests.request(
                method, url, headers=self._headers(), json=payload, params=params, timeout=30
            )
        except requests.RequestException as e:
            log.error(f"GitHub request failed: {e} ({method} {url})")
            raise TrackerApiError(None, str(e), url=url) from e
        if r.status_code >= 400:
            try:
                message = r.json().get("message") or r.reason
            except ValueError:
                message = r.text[:200] or r.reason
            log.error(f"GitHub API Error: {r.status_code} {message} ({method} {url})")
            raise TrackerApiError(r.status_code, message, url=url)
        return r

    # ── Issues ────────────────────────────────────────────────────────────────

    def create_issue(self, title):
        """Create an issue. Returns {number, title}."""
        r = self._request("POST", f"/repos/{self.full_name}/issues", {
            "title": title,
            "body": ISSUE_BODY,
        })
        data = r.json()
        log.info(f"Created issue #{data['number']} in {self.full_name}")
        return {"number": data["number"], "title": data["title"]}

    def set_issue_state(self, number, state):
        """Open or close an issue. Returns {number, title, state} as GitHub reports it."""
        if state not in ISSUE_STATES:
            raise ValueError(f"Unknown issue state: {state}")
        r = self._request("PATCH", f"/repos/{self.full_name}/issues/{number}", {"state": state})
        data = r.json()
        log.info(f"Issue #{number} in {self.full_name} is now {state}")
        return {"number": data.get("number", number), "title": data.get("title", ""), "state": data.get("state", state)}

    def add_assignee(self, number, username):
        self._request("POST", f"/repos/{self.full_name}/issues/{number}/assignees", {
            "assignees": [username],
        })
        log.info(f"Assigned {username} to issue #{number} in {self.full_name}")

    # ── Commits ───────────────────────────────────────────────────────────────

    def list_commits_since(self, since):
        """
        List commits on the default branch since a datetime, following pagination.
        Returns list of {sha, message, author_name, authored_at} dicts.
        """
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        since_iso = since.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        log.info(f"Fetching commits since {since_iso} for {self.full_name}")

        commits = []
        url = f"/repos/{self.full_name}/commits"
        params = {"since": since_iso, "per_page": 100}
        while url:
            r = self._request("GET", url, params=params)
            commits.extend(_parse_commit(c) for c in r.json())
            url = r.links.get("next", {}).get("url")
            params = None  # The next link already carries the query string
        return commits


def _parse_commit(data):
    commit = data.get("commit") or {}
    author = commit.get("author") or {}
    committer = commit.get("committer") or {}
    login = (data.get("author") or {}).get("login")
    date_str = author.get("date") or committer.get("date")
    return {
        "sha": data.get("sha", ""),
        "message": commit.get("message", ""),
        "author_name": author.get("name") or login or "Unknown Author",
        "authored_at": _parse_timestamp(date_str),
    }


def _parse_timestamp(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        log.warning(f"Unparseable commit timestamp: {value}")
        return None
