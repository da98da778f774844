"""
PM Bot - Entry Point
Telegram bot for GitHub issue commands plus a scheduled daily commit digest.
"""

from apscheduler.schedulers.background import BackgroundScheduler

from config import (
    log, BOT_TOKEN, GITHUB_PAT, GITHUB_OWNER, GITHUB_REPO, TARGET_CHAT_ID,
    DIGEST_TIMEZONE, DIGEST_CRON_HOUR, DIGEST_CRON_MINUTE, RUN_MANUAL_SUMMARY_ON_STARTUP,
)


def preflight_check():
    """Verify environment variables. Only BOT_TOKEN is fatal."""
    if not BOT_TOKEN:
        log.error("FATAL: BOT_TOKEN is not defined. Exiting.")
        return False

    if not GITHUB_PAT:
        log.warning("GITHUB_PAT is not defined. GitHub related features will fail.")
    if not GITHUB_OWNER or not GITHUB_REPO:
        log.warning(
            "GITHUB_OWNER or GITHUB_REPO is not defined. GitHub features might fail or target the wrong repository."
        )
    if not TARGET_CHAT_ID:
        log.warning("TARGET_CHAT_ID is not defined. Daily summaries will not be sent automatically.")

    log.info("Preflight check passed.")
    return True


def start_scheduler(job):
    """Run job every day at DIGEST_CRON_HOUR:DIGEST_CRON_MINUTE in DIGEST_TIMEZONE."""
    scheduler = BackgroundScheduler(timezone=DIGEST_TIMEZONE)
    scheduler.add_job(
        job,
        trigger="cron",
        hour=DIGEST_CRON_HOUR,
        minute=DIGEST_CRON_MINUTE,
        id="daily_commit_summary",
        replace_existing=True,
    )
    scheduler.start()
    log.info(f"Daily commit summary scheduled at {DIGEST_CRON_HOUR:02d}:{DIGEST_CRON_MINUTE:02d} {DIGEST_TIMEZONE}")
    return scheduler


if __name__ == "__main__":
    log.info("=== PM Bot starting ===")

    if not preflight_check():
        log.error("Aborting: fix environment variables and restart.")
        exit(1)

    from telegram_bot import run_daily_summary, start_polling

    start_scheduler(run_daily_summary)

    if RUN_MANUAL_SUMMARY_ON_STARTUP:
        log.info("Manually triggering daily commit summary on startup...")
        run_daily_summary()

    start_polling()
