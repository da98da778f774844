import pytest

import commands
from errors import ConfigurationError, TrackerApiError, ValidationError


@pytest.mark.parametrize(
    "text,expect",
    [
        ("#todo Fix login", ("#todo", "Fix login")),
        ("#TODO   Fix login  ", ("#todo", "Fix login")),
        ("#todo", ("#todo", "")),
        ("#close 12", ("#close", "12")),
        ("#Reopen 3", ("#reopen", "3")),
        ("#assign", None),
        ("hello there", None),
        ("please #todo later", None),
    ],
)
def test_parse_command(text, expect):
    assert commands.parse_command(text) == expect


@pytest.mark.parametrize(
    "text,expect",
    [
        ("12", 12),
        (" #12 ", 12),
        ("abc", None),
        ("", None),
        ("0", None),
        ("-3", None),
        ("12abc", None),
        ("²", None),
        ("#²", None),
        (None, None),
    ],
)
def test_parse_issue_number(text, expect):
    assert commands.parse_issue_number(text) == expect


def test_is_assign_trigger_is_case_insensitive():
    assert commands.is_assign_trigger("#ASSIGN")
    assert not commands.is_assign_trigger("assign #3")


@pytest.mark.parametrize("title", ["", "   "])
def test_create_issue_requires_title(tracker, title):
    with pytest.raises(ValidationError, match="provide a title"):
        commands.create_issue(tracker, title)
    assert tracker.calls == []


def test_create_issue_reports_number_and_title(tracker):
    out = commands.create_issue(tracker, "  Fix login ")
    assert tracker.calls == [("create_issue", "Fix login")]
    assert "Created Issue" in out
    assert "Fix login" in out
    assert "\\#7" in out


@pytest.mark.parametrize("handler", [commands.close_issue, commands.reopen_issue])
@pytest.mark.parametrize("value", ["abc", ""])
def test_state_change_rejects_bad_number(tracker, handler, value):
    with pytest.raises(ValidationError, match="Invalid issue number"):
        handler(tracker, value)
    assert tracker.calls == []


def test_close_issue(tracker):
    out = commands.close_issue(tracker, "12")
    assert tracker.calls == [("set_issue_state", 12, "closed")]
    assert "Closed Issue" in out
    assert "Fix login" in out


def test_reopen_issue(tracker):
    out = commands.reopen_issue(tracker, "#12")
    assert tracker.calls == [("set_issue_state", 12, "open")]
    assert "Reopened Issue" in out


def test_unauthorized_mentions_credentials(make_tracker):
    tracker = make_tracker(error=TrackerApiError(401, "Bad credentials"))
    out = commands.create_issue(tracker, "Fix login")
    assert "Bad credentials" in out
    assert "GITHUB\\_PAT" in out
    assert "Couldn't" not in out


def test_not_found_on_close(make_tracker):
    tracker = make_tracker(error=TrackerApiError(404, "Not Found"))
    out = commands.close_issue(tracker, "99")
    assert "Resource not found" in out


def test_configuration_error_is_reported(make_tracker):
    tracker = make_tracker(error=ConfigurationError("GITHUB_OWNER or GITHUB_REPO is not configured."))
    out = commands.reopen_issue(tracker, "3")
    assert "Configuration Error" in out


def test_describe_unprocessable_depends_on_action():
    error = TrackerApiError(422, "Validation Failed")
    assert "collaborator" in commands.describe_tracker_error(error, "assigning bob to issue #3")
    assert commands.describe_tracker_error(error, "issue creation").startswith("❌ Couldn't issue creation")


def test_describe_forbidden_names_repository():
    error = TrackerApiError(403, "Forbidden")
    assert "acme/widgets" in commands.describe_tracker_error(error, "issue creation", "acme/widgets")


def test_describe_other_status_uses_message():
    error = TrackerApiError(500, "Server Error")
    assert "Server Error" in commands.describe_tracker_error(error, "issue creation")


def test_help_lists_commands():
    text = commands.help_message()
    for trigger in ("#todo", "#close", "#reopen", "#assign"):
        assert trigger in text
