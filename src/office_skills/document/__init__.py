"""
Word文档工作流模块
"""

from .docx_tools import (
    docx_to_markdown,
    markdown_to_docx,
    extract_docx_text,
    docx_to_pdf,
    upgrade_legacy_doc,
)

__all__ = [
    "docx_to_markdown",
    "markdown_to_docx",
    "extract_docx_text",
    "docx_to_pdf",
    "upgrade_legacy_doc",
]
