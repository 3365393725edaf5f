"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.search_handler import parse_search_args
from services.export_service import ExportService
from utils.errors import InvalidInput
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


def _export_filename(field_name: str, field_value: str, extension: str) -> str:
    slug = "".join(c if c.isalnum() else "_" for c in field_value.strip().lower())[:40]
    return f"postings_{field_name.lower()}_{slug}.{extension}"


async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv <field> <value> - send a search result as CSV.
    Example: /export_csv status Lost
    """
    pair = parse_search_args(context.args)
    if pair is None:
        await update.message.reply_text("Usage: /export_csv <field> <value>\nExample: /export_csv status Lost")
        return

    field_name, field_value = pair
    await update.message.reply_text("Preparing CSV file...")

    try:
        buffer = export_service.export_search_csv(field_name, field_value)
        await update.message.reply_document(
            document=buffer,
            filename=_export_filename(field_name, field_value, "csv"),
            caption=f"Postings with {field_name} '{field_value}' - CSV",
        )
    except InvalidInput as e:
        await update.message.reply_text(str(e))
    except Exception as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text("Export failed. Please try again.")


async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_excel <field> <value> - send a search result as Excel.
    Example: /export_excel species Cat
    """
    pair = parse_search_args(context.args)
    if pair is None:
        await update.message.reply_text("Usage: /export_excel <field> <value>\nExample: /export_excel species Cat")
        return

    field_name, field_value = pair
    await update.message.reply_text("Preparing Excel file...")

    try:
        buffer = export_service.export_search_excel(field_name, field_value)
        await update.message.reply_document(
            document=buffer,
            filename=_export_filename(field_name, field_value, "xlsx"),
            caption=f"Postings with {field_name} '{field_value}' - Excel",
        )
    except InvalidInput as e:
        await update.message.reply_text(str(e))
    except Exception as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text("Export failed. Please try again.")
