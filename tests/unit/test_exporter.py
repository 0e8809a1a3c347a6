"""
Tests for skillsync.core.analytics.exporter — CSV serialization.
"""

import csv
import io

import pytest

from skillsync.core.analytics import render_csv, source_attribution, to_export_rows, write_csv
from skillsync.core.exceptions import ExportError

COLUMNS = ["name", "note"]


def parse(text: str) -> list[dict[str, str]]:
    return list(csv.DictReader(io.StringIO(text, newline="")))


class TestRenderCsv:
    def test_header_and_order(self):
        text = render_csv([{"note": "x", "name": "a"}], COLUMNS)
        assert text.splitlines()[0] == "name,note"
        assert text.splitlines()[1] == "a,x"

    def test_special_characters_survive(self):
        rows = [
            {"name": "Smith, Jane", "note": 'Said "hello"'},
            {"name": "Multi", "note": "line one\nline two"},
        ]
        assert parse(render_csv(rows, COLUMNS)) == rows

    def test_export_rows_round_trip(self, make_application):
        rows = source_attribution([make_application(source='Acme, Inc. "Careers"'), make_application()])
        columns = ["source", "count", "share"]
        shaped = to_export_rows(rows, columns, percent_columns=["share"])
        assert parse(render_csv(shaped, columns)) == shaped
        assert {r["source"] for r in shaped} == {'Acme, Inc. "Careers"', "LinkedIn"}

    def test_extra_keys_ignored(self):
        text = render_csv([{"name": "a", "note": "b", "secret": "c"}], COLUMNS)
        assert "secret" not in text

    def test_empty_rows(self):
        with pytest.raises(ExportError, match="No data"):
            render_csv([], COLUMNS)

    def test_no_columns(self):
        with pytest.raises(ExportError):
            render_csv([{"name": "a"}], [])


class TestWriteCsv:
    def test_writes_file(self, tmp_path):
        rows = [{"name": "Smith, Jane", "note": "ok"}]
        path = write_csv(rows, COLUMNS, "report", tmp_path / "out")

        assert path == tmp_path / "out" / "report.csv"
        assert parse(path.read_text(encoding="utf-8")) == rows

    def test_keeps_csv_suffix(self, tmp_path):
        assert write_csv([{"name": "a", "note": ""}], COLUMNS, "x.csv", tmp_path).name == "x.csv"

    def test_audit_entry(self, tmp_path, loguru_messages):
        write_csv([{"name": "a", "note": "b"}], COLUMNS, "audit", tmp_path)
        assert any("report_exported" in m for _, m in loguru_messages)

    def test_empty_rows_write_nothing(self, tmp_path):
        with pytest.raises(ExportError):
            write_csv([], COLUMNS, "empty", tmp_path)
        assert not (tmp_path / "empty.csv").exists()
