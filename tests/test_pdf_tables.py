"""
测试PDF表格提取
"""

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
from openpyxl import load_workbook

from office_skills.models import ExtractedTable, OfficeSkillError, FailureType
from office_skills.pdf import (
    clean_cell, clean_table, fill_merged_cells, normalize_columns,
    extract_tables, stitch_tables, extract_multipage_table,
    table_to_dataframe, export_tables
)


def _mock_pdf(pages_tables):
    """创建模拟的pdfplumber文档，每页返回给定的表格列表"""
    pages = []
    for tables in pages_tables:
        page = MagicMock()
        page.extract_tables.return_value = tables
        pages.append(page)
    pdf = MagicMock()
    pdf.__enter__.return_value = pdf
    pdf.pages = pages
    return pdf


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")
    return path


class TestCellCleaning:
    """测试单元格清理"""

    def test_clean_cell(self):
        assert clean_cell(None) == ""
        assert clean_cell(" Net\nIncome ") == "Net Income"
        assert clean_cell(42) == "42"

    def test_fill_merged_cells(self):
        """向右填充最近的非空值"""
        assert fill_merged_cells(["Q1", "", "Q2", ""]) == ["Q1", "Q1", "Q2", "Q2"]

    def test_fill_merged_leading_empty(self):
        """行首空单元格没有可填充的值"""
        assert fill_merged_cells(["", "", "A", ""]) == ["", "", "A", "A"]

    def test_normalize_columns(self):
        """补齐到最大列数，不做类型对齐"""
        assert normalize_columns([["a"], ["b", "c", "d"], []]) == [
            ["a", "", ""],
            ["b", "c", "d"],
            ["", "", ""],
        ]

    def test_normalize_empty(self):
        assert normalize_columns([]) == []

    def test_clean_table(self):
        raw = [["Region", None, "Total"], ["North\nEast", "", None, "extra"]]

        assert clean_table(raw) == [
            ["Region", "", "Total", ""],
            ["North East", "", "", "extra"],
        ]
        assert clean_table(raw, fill_merged=True)[0] == ["Region", "Region", "Total", ""]


class TestStitchTables:
    """测试跨页表格拼接"""

    def test_repeated_header_dropped(self):
        header = ["Date", "Amount"]
        pages = [
            [header, ["2024-01-01", "10"]],
            [header, ["2024-01-02", "20"]],
        ]

        assert stitch_tables(pages) == [header, ["2024-01-01", "10"], ["2024-01-02", "20"]]

    def test_different_first_row_kept(self):
        """首行与表头不完全相等时追加全部行"""
        pages = [
            [["Date", "Amount"], ["2024-01-01", "10"]],
            [["2024-01-02", "20"], ["2024-01-03", "30"]],
        ]

        assert len(stitch_tables(pages)) == 4

    def test_pages_without_tables_skipped(self):
        pages = [None, [["H"], ["1"]], [], [["H"], ["2"]]]

        assert stitch_tables(pages) == [["H"], ["1"], ["2"]]

    def test_no_fuzzy_matching(self):
        """表头比较区分大小写和空格"""
        pages = [[["Date", "Amount"], ["a", "1"]], [["date", "amount"], ["b", "2"]]]

        assert ["date", "amount"] in stitch_tables(pages)


class TestExtractTables:
    """测试表格提取"""

    def test_extract_tables(self, pdf_file):
        mock_pdf = _mock_pdf([
            [[["Name", "Value"], ["a", None]]],
            [],
            [[["X"]], [["Y", "Z"], ["1"]]],
        ])

        with patch("office_skills.pdf.tables.pdfplumber.open", return_value=mock_pdf):
            tables = extract_tables(pdf_file)

        assert [(t.page_number, t.table_index) for t in tables] == [(1, 0), (3, 0), (3, 1)]
        assert tables[0].rows == [["Name", "Value"], ["a", ""]]
        assert tables[2].rows == [["Y", "Z"], ["1", ""]]
        settings = mock_pdf.pages[0].extract_tables.call_args[0][0]
        assert settings["vertical_strategy"] == "lines"

    def test_extract_selected_pages_text_strategy(self, pdf_file):
        mock_pdf = _mock_pdf([[[["a"]]], [[["b"]]]])

        with patch("office_skills.pdf.tables.pdfplumber.open", return_value=mock_pdf):
            tables = extract_tables(pdf_file, strategy="text", pages=[2])

        assert [t.rows for t in tables] == [[["b"]]]
        mock_pdf.pages[0].extract_tables.assert_not_called()
        assert mock_pdf.pages[1].extract_tables.call_args[0][0]["horizontal_strategy"] == "text"

    def test_unknown_strategy(self, pdf_file):
        with pytest.raises(OfficeSkillError) as exc_info:
            extract_tables(pdf_file, strategy="stream")

        assert exc_info.value.failure_type == FailureType.VALIDATION_ERROR

    def test_missing_file(self, tmp_path):
        with pytest.raises(OfficeSkillError) as exc_info:
            extract_tables(tmp_path / "missing.pdf")

        assert exc_info.value.failure_type == FailureType.FILE_NOT_FOUND

    def test_invalid_pdf(self, pdf_file):
        with patch("office_skills.pdf.tables.pdfplumber.open", side_effect=ValueError("bad pdf")):
            with pytest.raises(OfficeSkillError) as exc_info:
                extract_tables(pdf_file)

        assert exc_info.value.failure_type == FailureType.INVALID_FILE_FORMAT

    def test_extract_multipage_table(self, pdf_file):
        """每页取第一个表格，重复表头只保留一次"""
        header = ["Date", "Amount", "Note"]
        mock_pdf = _mock_pdf([
            [[header, ["d1", "1", "x"]], [["other"]]],
            [],
            [[header, ["d2", "2"]]],
        ])

        with patch("office_skills.pdf.tables.pdfplumber.open", return_value=mock_pdf):
            rows = extract_multipage_table(pdf_file)

        assert rows == [header, ["d1", "1", "x"], ["d2", "2", ""]]


class TestTableExport:
    """测试表格转换与导出"""

    def test_table_to_dataframe(self):
        df = table_to_dataframe([["a", "b"], ["1", "2"], ["3"]])

        assert list(df.columns) == ["a", "b"]
        assert df.shape == (2, 2)
        assert df.iloc[1]["b"] == ""

    def test_table_to_dataframe_without_header(self):
        assert table_to_dataframe([["1", "2"]], header=False).shape == (1, 2)

    def test_empty_table(self):
        assert table_to_dataframe([]).empty

    def test_export_csv(self, tmp_path):
        tables = [
            ExtractedTable(page_number=1, table_index=0, rows=[["a", "b"], ["1", "2"]]),
            ExtractedTable(page_number=2, table_index=1, rows=[["c"], ["3"]]),
        ]

        paths = export_tables(tables, tmp_path / "annual-report")

        assert [p.name for p in paths] == ["page-1-table-1.csv", "page-2-table-2.csv"]
        df = pd.read_csv(paths[0])
        assert list(df.columns) == ["a", "b"]

    def test_export_xlsx(self, tmp_path):
        tables = [
            ExtractedTable(page_number=1, table_index=0, rows=[["a"], ["1"]]),
            ExtractedTable(page_number=3, table_index=0, rows=[["b"], ["2"]]),
        ]

        paths = export_tables(tables, tmp_path, fmt="xlsx")

        wb = load_workbook(paths[0])
        assert wb.sheetnames == ["Page1_Table1", "Page3_Table1"]

    def test_export_invalid_format(self, tmp_path):
        with pytest.raises(OfficeSkillError):
            export_tables([], tmp_path, fmt="json")

    def test_export_nothing(self, tmp_path):
        assert export_tables([], tmp_path) == []
