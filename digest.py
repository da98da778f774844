"""
PM Bot - Daily Commit Digest
Collects the last 24 hours of commits and posts a summary to TARGET_CHAT_ID.
Runs from the scheduler once a day and on demand via /summary.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from telebot.formatting import escape_markdown, mbold, mitalic

from config import DIGEST_TIMEZONE, TARGET_CHAT_ID, log
from errors import ConfigurationError, TrackerApiError, TransportError

LOOKBACK = timedelta(hours=24)
NO_ACTIVITY = "No new commits in the last 24 hours. 😴"


def _inline_code(content):
    # telebot.formatting.mcode renders a ``` block, not inline monospace
    return "`" + escape_markdown(content) + "`"


def format_commit(commit, tz):
    sha = commit["sha"][:7]
    message = (commit["message"] or "").split("\n")[0]
    line = f"🔨 {_inline_code(f'[{sha}]')} {mbold(message)} - {mitalic(commit['author_name'])}"
    if commit.get("authored_at"):
        local = commit["authored_at"].astimezone(tz)
        line += escape_markdown(f" (at {local.strftime('%I:%M %p')})")
    return line


def build_summary(commits, tz_name=DIGEST_TIMEZONE):
    """Render the digest message (MarkdownV2) for a list of commit dicts."""
    tz = ZoneInfo(tz_name)
    lines = [mbold("🗓️ Daily Commit Summary (Last 24 Hours)"), ""]
    if not commits:
        lines.append(escape_markdown(NO_ACTIVITY))
    else:
        lines.extend(format_commit(c, tz) for c in commits)
    return "\n".join(lines)


def _failure_detail(error, repo_name, chat_id):
    if isinstance(error, TrackerApiError):
        if error.category == "unauthorized":
            return f"Failed to send daily summary for {repo_name}: Bad GitHub credentials."
        if error.category == "forbidden":
            return f"Failed to send daily summary for {repo_name}: GitHub permission denied."
        if error.category == "not_found":
            return f"Failed to send daily summary: GitHub Repository {repo_name} not found."
    if isinstance(error, TransportError):
        if error.kind == "topic_closed":
            return f"Failed to send daily summary to {chat_id}: Telegram topic is closed or chat issue."
        if error.kind == "chat_not_found":
            return f"Failed to send daily summary to {chat_id}: Telegram chat not found."
    return f"Failed to send daily summary for {repo_name}: {error}"


def _notify(send, chat_id, text):
    """Best-effort plain-text notice to the digest chat."""
    try:
        send(chat_id, text, parse_mode=None)
    except TransportError as e:
        log.error(f"Failed to send error notification about daily summary to {chat_id}: {e.description}")


def send_daily_commit_summary(tracker, send, chat_id=TARGET_CHAT_ID, now=None):
    """
    Fetch commits since now - 24h and post the digest to chat_id via send(chat_id, text, parse_mode=...).
    Returns the digest text that was sent, or None if nothing was delivered.
    """
    if not chat_id:
        log.error("TARGET_CHAT_ID not set. Cannot send daily commit summary.")
        return None

    try:
        tracker.ensure_configured()
    except ConfigurationError as e:
        log.error(f"Configuration error for daily summary: {e}")
        _notify(send, chat_id, f"⚠️ Cannot generate daily commit summary: {e}")
        return None

    now = now or datetime.now(timezone.utc)
    repo_name = getattr(tracker, "full_name", "the repository")
    try:
        commits = tracker.list_commits_since(now - LOOKBACK)
        summary = build_summary(commits)
        send(chat_id, summary, parse_mode="MarkdownV2")
    except (TrackerApiError, TransportError) as e:
        log.error(f"Error fetching or sending daily commit summary: {e}")
        detail = _failure_detail(e, repo_name, chat_id)
        _notify(send, chat_id, f"⚠️ Error generating daily commit summary. Details: {detail}")
        return None

    log.info(f"Daily commit summary sent successfully to chat: {chat_id} ({len(commits)} commits)")
    return summary
