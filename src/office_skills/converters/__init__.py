"""
外部转换工具模块
封装 LibreOffice 和 pandoc 命令行调用
"""

from .libreoffice import run_soffice, convert_document, convert_legacy_format
from .pandoc import convert_to_markdown, convert_from_markdown

__all__ = [
    "run_soffice",
    "convert_document",
    "convert_legacy_format",
    "convert_to_markdown",
    "convert_from_markdown",
]
