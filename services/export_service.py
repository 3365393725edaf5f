"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of posting search results.
"""

import io
from datetime import datetime, timezone

import pandas as pd

from services.animal_service import AnimalService
from utils.logger import get_logger

logger = get_logger(__name__)

# Export column headers, in order, keyed by serialized field name.
_COLUMNS = {
    "observed_at": "Observed",
    "status": "Status",
    "name": "Name",
    "species": "Species",
    "gender": "Gender",
    "color": "Color",
    "location": "Location",
    "description": "Description",
    "image_url": "Image",
    "id": "Posting ID",
}


class ExportService:
    """Generates downloadable posting reports in CSV and Excel formats."""

    def __init__(self, animal_service: AnimalService | None = None):
        self.animal_service = animal_service or AnimalService()

    def _frame(self, field_name: str, field_value: str) -> pd.DataFrame:
        """Run the search and tabulate the results."""
        postings = self.animal_service.search(field_name, field_value)
        data = [
            {
                header: (
                    datetime.fromtimestamp(p[key] / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
                    if key == "observed_at"
                    else p[key]
                )
                for key, header in _COLUMNS.items()
            }
            for p in postings
        ]
        return pd.DataFrame(data, columns=list(_COLUMNS.values()))

    def export_search_csv(self, field_name: str, field_value: str) -> io.BytesIO:
        """
        Export a search result as a CSV file.

        Args:
            field_name: Searchable field.
            field_value: Search term.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._frame(field_name, field_value)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} postings as CSV for {field_name}={field_value!r}")
        return buffer

    def export_search_excel(self, field_name: str, field_value: str) -> io.BytesIO:
        """
        Export a search result as an Excel (.xlsx) file, with a second
        sheet counting postings per status.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        df = self._frame(field_name, field_value)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Postings", index=False)

            if not df.empty:
                summary = df.groupby("Status").size().reset_index(name="Count")
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} postings as Excel for {field_name}={field_value!r}")
        return buffer
