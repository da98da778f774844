import pytest

from errors import ConfigurationError


class FakeTracker:
    """In-memory stand-in for GitHubTracker that records every call."""

    full_name = "acme/widgets"

    def __init__(self, error=None, commits=None, config_error=None):
        self.calls = []
        self.error = error
        self.commits = commits or []
        self.config_error = config_error

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def ensure_configured(self):
        if self.config_error:
            raise ConfigurationError(self.config_error)

    def create_issue(self, title):
        self.calls.append(("create_issue", title))
        self._maybe_fail()
        return {"number": 7, "title": title}

    def set_issue_state(self, number, state):
        self.calls.append(("set_issue_state", number, state))
        self._maybe_fail()
        return {"number": number, "title": "Fix login", "state": state}

    def add_assignee(self, number, username):
        self.calls.append(("add_assignee", number, username))
        self._maybe_fail()

    def list_commits_since(self, since):
        self.calls.append(("list_commits_since", since))
        self._maybe_fail()
        return list(self.commits)


@pytest.fixture
def tracker():
    return FakeTracker()


@pytest.fixture
def make_tracker():
    return FakeTracker
