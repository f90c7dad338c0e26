"""Test cases for saving export files."""

from datetime import date

import pytest

from exports import SaveError, export_filename, save_export


class TestExportFilename:
    """Test cases for the export file name convention."""

    def test_csv_name(self):
        assert export_filename('csv', date(2026, 10, 18)) == "grades-export-2026-10-18.csv"

    def test_json_name(self):
        assert export_filename('json', date(2026, 1, 5)) == "grades-export-2026-01-05.json"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            export_filename('xlsx')


class TestSaveExport:
    """Test cases for writing the document to disk."""

    def test_writes_file(self, tmp_path):
        path = save_export('"Grade"\n"90"\n', 'csv', tmp_path, on_date=date(2026, 10, 18))

        assert path == tmp_path / "grades-export-2026-10-18.csv"
        assert path.read_text(encoding='utf-8') == '"Grade"\n"90"\n'

    def test_creates_directory(self, tmp_path):
        target = tmp_path / "nested" / "exports"
        path = save_export("[]", 'json', target, filename="custom.json")

        assert path.read_text(encoding='utf-8') == "[]"

    def test_unknown_kind_writes_nothing(self, tmp_path):
        with pytest.raises(ValueError):
            save_export("data", 'xlsx', tmp_path, filename="grades.xlsx")

        assert list(tmp_path.iterdir()) == []

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("occupied")

        with pytest.raises(SaveError) as exc_info:
            save_export("[]", 'json', blocker, filename="out.json")

        assert exc_info.value.path == blocker / "out.json"
