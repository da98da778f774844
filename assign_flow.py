"""
PM Bot - Assign Flow
Two-question dialogue behind #assign: ask for the issue number, then the GitHub username.
"""

from telebot.formatting import escape_markdown, mbold

from commands import parse_issue_number, tracker_error_reply
from config import log
from errors import ConfigurationError, TrackerApiError, ValidationError
from sessions import Step


def begin(session):
    session.advance(Step.AWAITING_ISSUE_NUMBER)
    return escape_markdown("📝 Which issue number do you want to assign?")


def collect_issue_number(session, text):
    """Store the issue number and move on, or re-prompt leaving the session as it was."""
    number = parse_issue_number(text)
    if number is None:
        raise ValidationError("❗ Please enter a valid number.")
    session.advance(Step.AWAITING_ASSIGNEE, issue_number=number)
    return escape_markdown(f"👤 Who should I assign to issue #{number}? (GitHub username)")


def collect_assignee(session, text, tracker):
    """
    Assign the user and end the dialogue. The session goes back to idle whether
    or not GitHub accepted the assignment; a retry starts over with #assign.
    """
    username = text.strip()
    number = session.issue_number
    try:
        tracker.add_assignee(number, username)
        reply = escape_markdown("✅ Assigned ") + mbold(username) + escape_markdown(f" to issue #{number}")
    except (TrackerApiError, ConfigurationError) as e:
        reply = tracker_error_reply(e, f"assigning {username} to issue #{number}", tracker)
    finally:
        session.advance(Step.IDLE)
    log.info(f"Assign flow finished for issue #{number} ({username})")
    return reply
