"""
PM Bot - Issue Commands
Parses #todo / #close / #reopen / #assign messages and runs the matching GitHub action.
Replies are Telegram MarkdownV2.
"""

from telebot.formatting import escape_markdown, mbold

from config import log
from errors import ConfigurationError, TrackerApiError, ValidationError

ASSIGN_TRIGGER = "#assign"


# ── Parsing ──────────────────────────────────────────────────────────────────

def parse_issue_number(text):
    """Parse '12' or '#12' into a positive int. Returns None if it isn't one."""
    value = (text or "").strip()
    if value.startswith("#"):
        value = value[1:]
    if not value.isdecimal():
        return None
    number = int(value, 10)
    return number if number > 0 else None


def parse_command(text):
    """
    Match text against the issue command triggers (case-insensitive).
    Returns (trigger, remainder) or None. The remainder may be empty.
    """
    lowered = text.lower()
    for trigger in ISSUE_COMMANDS:
        if lowered.startswith(trigger):
            return trigger, text[len(trigger):].strip()
    return None


def is_assign_trigger(text):
    return text.lower().startswith(ASSIGN_TRIGGER)


# ── Error replies ─────────────────────────────────────────────────────────────

def describe_tracker_error(error, action, repo_name="the repository"):
    """Map a tracker or configuration failure to a plain-text message for the chat."""
    if isinstance(error, ConfigurationError):
        return f"❌ Configuration Error: {error}"

    category = error.category
    if category == "unauthorized":
        return f"❌ GitHub Error ({action}): Bad credentials. Check GITHUB_PAT."
    if category == "forbidden":
        return f"❌ GitHub Error ({action}): Permission denied. Check GITHUB_PAT scopes for {repo_name}."
    if category == "not_found":
        return (
            f"❌ GitHub Error ({action}): Resource not found (repository, issue, or user). "
            "Check GITHUB_OWNER/GITHUB_REPO and input."
        )
    if category == "unprocessable" and "assign" in action.lower():
        return (
            f"❌ GitHub Error ({action}): Could not assign user. "
            "They might not be a collaborator or the username is incorrect."
        )
    return f"❌ Couldn't {action.lower()}. Error: {error.message or 'Unknown GitHub API error'}"


def tracker_error_reply(error, action, tracker):
    log.error(f"Error during GitHub {action}: {error}")
    message = describe_tracker_error(error, action, getattr(tracker, "full_name", "the repository"))
    return escape_markdown(message)


def _require_number(number_text):
    number = parse_issue_number(number_text)
    if number is None:
        raise ValidationError("❗ Invalid issue number.")
    return number


# ── Handlers ──────────────────────────────────────────────────────────────────

def create_issue(tracker, title):
    title = (title or "").strip()
    if not title:
        raise ValidationError("❗ Please provide a title.")
    try:
        issue = tracker.create_issue(title)
    except (TrackerApiError, ConfigurationError) as e:
        return tracker_error_reply(e, "issue creation", tracker)
    return escape_markdown("✅ Created Issue:") + "\n" + mbold(f"#{issue['number']} - {issue['title']}")


def close_issue(tracker, number_text):
    number = _require_number(number_text)
    try:
        issue = tracker.set_issue_state(number, "closed")
    except (TrackerApiError, ConfigurationError) as e:
        return tracker_error_reply(e, f"closing issue #{number}", tracker)
    return escape_markdown(f"🔒 Closed Issue #{number} - ") + mbold(issue["title"])


def reopen_issue(tracker, number_text):
    number = _require_number(number_text)
    try:
        issue = tracker.set_issue_state(number, "open")
    except (TrackerApiError, ConfigurationError) as e:
        return tracker_error_reply(e, f"reopening issue #{number}", tracker)
    return escape_markdown(f"♻️ Reopened Issue #{number} - ") + mbold(issue["title"])


# Checked in this order; no trigger is a prefix of another
ISSUE_COMMANDS = {
    "#todo": create_issue,
    "#close": close_issue,
    "#reopen": reopen_issue,
}


def help_message():
    return (
        "🚀 " + mbold("Project Manager Bot") + "\n"
        "➕ " + mbold("Create Issue:") + " `#todo <Your issue>`\n"
        "📌 " + mbold("Close Issue:") + " `#close <Issue Number>`\n"
        "🔁 " + mbold("Reopen Issue:") + " `#reopen <Issue Number>`\n"
        "👤 " + mbold("Assign User:") + " `#assign` " + escape_markdown("and I'll guide you") + "\n"
        "📰 " + mbold("Commit Summary:") + " /summary\n"
        "_Example:_\n"
        + escape_markdown("#todo Fix login") + "\n"
        + escape_markdown("#close 12")
    )
