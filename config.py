"""
PM Bot - Configuration
Environment variables, constants, and the shared logger.
"""

import os
import logging

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(message)s",
)
log = logging.getLogger("pm_bot")

# ── Telegram ──────────────────────────────────────────────────────────────────
BOT_TOKEN = os.getenv("BOT_TOKEN")
TARGET_CHAT_ID = os.getenv("TARGET_CHAT_ID")  # Destination for the daily digest

# ── GitHub ────────────────────────────────────────────────────────────────────
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_PAT = os.getenv("GITHUB_PAT")
GITHUB_OWNER = os.getenv("GITHUB_OWNER")
GITHUB_REPO = os.getenv("GITHUB_REPO")
ISSUE_BODY = "Created via Telegram Bot"

# ── Daily digest ──────────────────────────────────────────────────────────────
DIGEST_TIMEZONE = os.getenv("DIGEST_TIMEZONE", "Asia/Kolkata")
DIGEST_CRON_HOUR = int(os.getenv("DIGEST_CRON_HOUR", "7"))
DIGEST_CRON_MINUTE = int(os.getenv("DIGEST_CRON_MINUTE", "0"))
RUN_MANUAL_SUMMARY_ON_STARTUP = (
    os.getenv("RUN_MANUAL_SUMMARY_ON_STARTUP", "false").lower() in ("1", "true", "yes")
)

# ── Dialogue ──────────────────────────────────────────────────────────────────
# 0 keeps an abandoned #assign dialogue until the chat's next message
DIALOGUE_TIMEOUT_MINUTES = int(os.getenv("DIALOGUE_TIMEOUT_MINUTES", "0"))
