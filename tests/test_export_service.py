"""Tests for services/export_service.py."""

from __future__ import annotations

from unittest.mock import MagicMock

import pandas as pd
import pytest

from services.export_service import ExportService


@pytest.fixture
def export_service(serialized_postings) -> ExportService:
    """An ExportService whose searches return the serialized fixtures."""
    animal_service = MagicMock()
    animal_service.search.return_value = serialized_postings
    return ExportService(animal_service=animal_service)


class TestExportService:
    """Tests for CSV and Excel exports."""

    def test_csv(self, export_service: ExportService) -> None:
        """CSV has one row per posting with readable dates."""
        buffer = export_service.export_search_csv("status", "Lost")
        df = pd.read_csv(buffer, encoding="utf-8-sig")
        assert list(df["Name"]) == ["Luna", "Max"]
        assert df.loc[0, "Observed"] == "2024-03-01 00:00"
        export_service.animal_service.search.assert_called_once_with("status", "Lost")

    def test_excel_sheets(self, export_service: ExportService) -> None:
        """Excel has the postings plus a per-status summary."""
        buffer = export_service.export_search_excel("species", "Cat")
        sheets = pd.read_excel(buffer, sheet_name=None)
        assert set(sheets) == {"Postings", "Summary"}
        summary = dict(zip(sheets["Summary"]["Status"], sheets["Summary"]["Count"]))
        assert summary == {"Found": 1, "Lost": 1}

    def test_empty_result(self) -> None:
        """An empty search still yields a CSV with headers."""
        animal_service = MagicMock()
        animal_service.search.return_value = []
        buffer = ExportService(animal_service=animal_service).export_search_csv("color", "Purple")
        df = pd.read_csv(buffer, encoding="utf-8-sig")
        assert df.empty
        assert "Posting ID" in df.columns
