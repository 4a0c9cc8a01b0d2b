"""
PDF工作流模块
表格提取、OCR、文本提取与页面操作
"""

from .tables import (
    clean_cell,
    clean_table,
    fill_merged_cells,
    normalize_columns,
    extract_tables,
    stitch_tables,
    extract_multipage_table,
    table_to_dataframe,
    export_tables,
)
from .text import extract_text, pdf_to_markdown, merge_pdfs, split_pdf, page_count
from .ocr import ocr_pdf, ocr_image, preprocess_image

__all__ = [
    "clean_cell",
    "clean_table",
    "fill_merged_cells",
    "normalize_columns",
    "extract_tables",
    "stitch_tables",
    "extract_multipage_table",
    "table_to_dataframe",
    "export_tables",
    "extract_text",
    "pdf_to_markdown",
    "merge_pdfs",
    "split_pdf",
    "page_count",
    "ocr_pdf",
    "ocr_image",
    "preprocess_image",
]
