"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from repositories.animal_repo import SEARCH_FIELDS
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = f"""
LostPaws - lost and found pets

Available commands:
/search <field> <value> - search postings ({', '.join(SEARCH_FIELDS)})
/active - animals still lost or found
/stories - reunited animals
/export_csv <field> <value> - search result as CSV
/export_excel <field> <value> - search result as Excel
/help - show this message

Examples:
/search status Lost
/search color brown
/search gender Female
"""


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} started the bot.")
    await update.message.reply_text(
        f"Hello {user.first_name}!\n"
        f"Search lost and found pets near you.\n\n"
        f"Type /help to see every command."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)
