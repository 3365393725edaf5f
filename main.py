"""
main.py
-------
Entry point for the LostPaws Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.search_handler import active_command, search_command, stories_command
from handlers.start_handler import help_command, start_command
from utils.logger import get_logger

logger = get_logger(__name__)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "Start the bot"),
        BotCommand("help", "Show help"),
        BotCommand("search", "Search postings by field"),
        BotCommand("active", "Animals still lost or found"),
        BotCommand("stories", "Reunited animals"),
        BotCommand("export_csv", "Export a search as CSV"),
        BotCommand("export_excel", "Export a search as Excel"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def build_application(token: str = TELEGRAM_BOT_TOKEN) -> Application:
    """Build the Telegram application with every command handler registered."""
    app = Application.builder().token(token).post_init(set_bot_commands).build()

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("search", search_command))
    app.add_handler(CommandHandler("active", active_command))
    app.add_handler(CommandHandler("stories", stories_command))
    app.add_handler(CommandHandler("export_csv", export_csv_command))
    app.add_handler(CommandHandler("export_excel", export_excel_command))
    return app


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = build_application()

    # ── 3. Start polling ──────────────────────────────────
    logger.info("LostPaws is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 4. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("LostPaws stopped.")


if __name__ == "__main__":
    main()
