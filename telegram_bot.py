"""
PM Bot - Telegram Bot
Registers /start, /help, /summary and the #command text handler, and owns message sending.
"""

import re

import requests
import telebot
from telebot.apihelper import ApiException, ApiTelegramException

from commands import help_message
from config import BOT_TOKEN, DIALOGUE_TIMEOUT_MINUTES, TARGET_CHAT_ID, log
from digest import send_daily_commit_summary
from dispatcher import Dispatcher
from errors import TransportError
from github_client import GitHubTracker
from sessions import SessionStore


class BotExceptionHandler(telebot.ExceptionHandler):
    """Last-resort sink for anything escaping a handler. Keeps polling alive."""

    def handle(self, exception):
        if isinstance(exception, ApiTelegramException):
            log.error(f"Telegram API error ({describe_transport_error(exception)}): {exception.description}")
        else:
            log.error(f"Unhandled bot error: {exception}", exc_info=exception)
        return True


tracker = GitHubTracker()
dispatcher = Dispatcher(tracker, SessionStore(timeout_minutes=DIALOGUE_TIMEOUT_MINUTES))
bot = telebot.TeleBot(BOT_TOKEN, exception_handler=BotExceptionHandler()) if BOT_TOKEN else None


# ── Sending ───────────────────────────────────────────────────────────────────

def describe_transport_error(error):
    """Classify a Telegram failure as topic_closed, chat_not_found or other."""
    description = (getattr(error, "description", None) or str(error)).lower()
    if "topic_closed" in description or "topic closed" in description:
        return "topic_closed"
    if "chat_not_found" in description or "chat not found" in description:
        return "chat_not_found"
    return "other"


def _strip_markdown(text):
    """Drop MarkdownV2 markers and escapes, keeping escaped characters as text."""
    text = re.sub(r"(?<!\\)[*_`]", "", text.replace("\r", ""))
    return re.sub(r"\\(.)", r"\1", text)


def send_text(chat_id, text, parse_mode="MarkdownV2", thread_id=None):
    """
    Send a message, retrying once without formatting if Telegram rejects the markup.
    Raises TransportError if the message could not be delivered.
    """
    if not bot:
        raise TransportError("other", "BOT_TOKEN is not set", chat_id)
    try:
        return bot.send_message(
            chat_id, text, parse_mode=parse_mode,
            message_thread_id=thread_id, disable_web_page_preview=True,
        )
    except ApiTelegramException as e:
        if parse_mode and "can't parse entities" in (e.description or "").lower():
            log.warning(f"Markdown rejected for chat {chat_id}, resending as plain text: {e.description}")
            return send_text(chat_id, _strip_markdown(text), parse_mode=None, thread_id=thread_id)
        kind = describe_transport_error(e)
        log.error(f"Telegram send failed for chat {chat_id} ({kind}): {e.description}")
        raise TransportError(kind, e.description, chat_id) from e
    except (ApiException, requests.RequestException) as e:
        log.error(f"Telegram send failed for chat {chat_id}: {e}")
        raise TransportError("other", str(e), chat_id) from e


TRANSPORT_NOTICES = {
    "topic_closed": (
        "⚠️ Telegram Error: Cannot send message because the target topic is closed or I'm not allowed there. "
        "Please check the group's topic settings or the bot's TARGET_CHAT_ID configuration."
    ),
    "chat_not_found": (
        "⚠️ Telegram Error: Chat not found. Is TARGET_CHAT_ID correct and is the bot a member of the chat?"
    ),
}


def reply(message, text, parse_mode="MarkdownV2"):
    """Answer in the message's chat (and forum topic); on failure try a plain-text notice once."""
    chat_id = message.chat.id
    thread_id = getattr(message, "message_thread_id", None)
    try:
        send_text(chat_id, text, parse_mode=parse_mode, thread_id=thread_id)
    except TransportError as e:
        notice = TRANSPORT_NOTICES.get(e.kind)
        if not notice:
            return
        try:
            send_text(chat_id, notice, parse_mode=None)
        except TransportError as e2:
            log.error(f"Secondary notification to chat {chat_id} failed: {e2.description}")


def run_daily_summary():
    send_daily_commit_summary(tracker, send_text, TARGET_CHAT_ID)


# ── Handlers ──────────────────────────────────────────────────────────────────

def register_handlers():
    """Register all bot command and message handlers."""
    if not bot:
        return

    @bot.message_handler(commands=["start"])
    def handle_start(message):
        log.info("START command received")
        reply(message, "Welcome to Project Manager Bot! I am working now.", parse_mode=None)

    @bot.message_handler(commands=["help"])
    def handle_help(message):
        log.info("HELP command received")
        reply(message, help_message())

    @bot.message_handler(commands=["summary"])
    def handle_summary(message):
        log.info(f"SUMMARY command received from chat {message.chat.id}")
        if not TARGET_CHAT_ID:
            reply(message, "⚠️ TARGET_CHAT_ID is not configured, so there is nowhere to post the summary.", parse_mode=None)
            return
        reply(message, "Generating commit summary for the last 24 hours...", parse_mode=None)
        run_daily_summary()

    @bot.message_handler(content_types=["text"])
    def handle_text(message):
        answer = dispatcher.handle(message.chat.id, message.text)
        if answer:
            reply(message, answer)


def start_polling():
    """Start the Telegram bot with long polling."""
    if not bot:
        log.warning("Telegram bot not started: BOT_TOKEN not set.")
        return

    register_handlers()
    log.info("Telegram bot starting (polling)...")

    try:
        bot.infinity_polling(timeout=20, long_polling_timeout=20)
    except Exception as e:
        log.error(f"Telegram bot crashed: {e}", exc_info=True)
