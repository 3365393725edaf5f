"""
handlers/search_handler.py
---------------------------
The postings list view.
Each command resolves a (field, value) pair, delegates the search to
AnimalService and renders the result newest first.
"""

from telegram import Update
from telegram.constants import MessageLimit
from telegram.ext import ContextTypes

from config import SEARCH_RESULT_LIMIT
from repositories.animal_repo import SEARCH_FIELDS
from services.animal_service import AnimalService, format_posting_list
from utils.errors import InvalidInput, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)
animal_service = AnimalService()

SEARCH_USAGE = (
    "Usage: /search <field> <value>\n"
    f"Fields: {', '.join(SEARCH_FIELDS)}\n"
    "Example: /search status Lost"
)
TITLE_MAX = 200


def parse_search_args(args: list[str] | None) -> tuple[str, str] | None:
    """
    Split command arguments into (field, value).
    The value may contain spaces: /search description black collar

    Returns:
        The pair, or None if either part is missing.
    """
    if not args or len(args) < 2:
        return None
    return args[0], " ".join(args[1:])


async def _reply_with_postings(update: Update, postings: list[dict], title: str) -> None:
    # Telegram rejects messages longer than MAX_TEXT_LENGTH
    header = f"{title[:TITLE_MAX]} ({len(postings)})\n\n"
    body = format_posting_list(
        postings,
        limit=SEARCH_RESULT_LIMIT,
        max_chars=MessageLimit.MAX_TEXT_LENGTH - len(header),
    )
    await update.message.reply_text(header + body)


async def search_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /search <field> <value>.
    Usage: /search color brown
    """
    pair = parse_search_args(context.args)
    if pair is None:
        await update.message.reply_text(SEARCH_USAGE)
        return

    field_name, field_value = pair
    try:
        postings = animal_service.search(field_name, field_value)
    except InvalidInput as e:
        await update.message.reply_text(f"{e}\n\n{SEARCH_USAGE}")
        return
    except StorageError as e:
        logger.error(f"Search {field_name}={field_value!r} failed: {e}")
        await update.message.reply_text("Search failed. Please try again later.")
        return

    await _reply_with_postings(update, postings, f"Postings with {field_name} '{field_value}'")


async def stories_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stories - postings whose animal has been reunited."""
    try:
        postings = animal_service.success_stories()
    except StorageError as e:
        logger.error(f"Loading success stories failed: {e}")
        await update.message.reply_text("Could not load success stories. Please try again later.")
        return

    await _reply_with_postings(update, postings, "Success stories")


async def active_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /active - every posting that is still lost or found."""
    try:
        postings = animal_service.active()
    except StorageError as e:
        logger.error(f"Loading active postings failed: {e}")
        await update.message.reply_text("Could not load postings. Please try again later.")
        return

    await _reply_with_postings(update, postings, "Active postings")
