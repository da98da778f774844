"""
PM Bot - Dispatcher
Routes one incoming chat message by the chat's dialogue step and returns the reply (if any).
"""

from telebot.formatting import escape_markdown

import assign_flow
from commands import ISSUE_COMMANDS, is_assign_trigger, parse_command
from config import log
from errors import ValidationError
from sessions import SessionStore, Step

COMMAND_PREFIX = "/"


class Dispatcher:
    def __init__(self, tracker, store=None):
        self.tracker = tracker
        self.store = store if store is not None else SessionStore()
        self._steps = {
            Step.IDLE: self._idle,
            Step.AWAITING_ISSUE_NUMBER: self._issue_number,
            Step.AWAITING_ASSIGNEE: self._assignee,
        }

    def handle(self, chat_id, text):
        """
        Process one text message. Returns a MarkdownV2 reply, or None when the
        message needs no answer. Never raises.
        """
        if not text:
            return None
        text = text.strip()
        # /start, /help, /summary are handled by the bot's command handlers
        if text.startswith(COMMAND_PREFIX):
            return None

        with self.store.lock(chat_id):
            session = self.store.get(chat_id)
            handler = self._steps[session.step]
            try:
                return handler(session, text)
            except ValidationError as e:
                return escape_markdown(str(e))
            except Exception as e:
                log.error(f"Unhandled error for chat {chat_id} at step {session.step.value}: {e}", exc_info=True)
                return escape_markdown("⚠️ Something went wrong handling that message. Check the bot logs.")

    def _idle(self, session, text):
        parsed = parse_command(text)
        if parsed:
            trigger, value = parsed
            log.info(f"Running {trigger} command")
            return ISSUE_COMMANDS[trigger](self.tracker, value)
        if is_assign_trigger(text):
            return assign_flow.begin(session)
        return None

    def _issue_number(self, session, text):
        return assign_flow.collect_issue_number(session, text)

    def _assignee(self, session, text):
        return assign_flow.collect_assignee(session, text, self.tracker)
