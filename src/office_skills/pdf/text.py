"""
PDF文本提取与页面操作
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pdfplumber
import pymupdf4llm
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..models import PageText, OfficeSkillError, FailureType
from ..utils import get_logger, normalize_content

logger = get_logger("office_skills.pdf.text")


def _check_exists(pdf_path: Union[str, Path]) -> Path:
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise OfficeSkillError(f"文件不存在: {pdf_path}", FailureType.FILE_NOT_FOUND)
    return pdf_path


def _reader(pdf_path: Union[str, Path]) -> PdfReader:
    try:
        return PdfReader(str(_check_exists(pdf_path)))
    except PdfReadError as e:
        raise OfficeSkillError(f"无法读取PDF文件: {pdf_path}, 错误: {e}", FailureType.INVALID_FILE_FORMAT)


def page_count(pdf_path: Union[str, Path]) -> int:
    """返回PDF页数"""
    return len(_reader(pdf_path).pages)


def extract_text(pdf_path: Union[str, Path], pages: Optional[Iterable[int]] = None) -> List[PageText]:
    """
    使用pdfplumber逐页提取文本

    Args:
        pdf_path: PDF文件路径
        pages: 页码（从1开始），None表示全部页面

    Returns:
        每页文本
    """
    pdf_path = _check_exists(pdf_path)
    wanted = set(pages) if pages else None
    results = []

    with pdfplumber.open(str(pdf_path)) as pdf:
        for page_number, page in enumerate(pdf.pages, 1):
            if wanted is not None and page_number not in wanted:
                continue
            text = normalize_content(page.extract_text() or "")
            results.append(PageText(page_number=page_number, text=text))

    if results and not any(page.text for page in results):
        logger.warning(f"{pdf_path.name} 没有可提取的文本层，可能是扫描件，请使用OCR")
    return results


def pdf_to_markdown(pdf_path: Union[str, Path]) -> str:
    """
    使用PyMuPDF4LLM将PDF转换为Markdown

    Args:
        pdf_path: PDF文件路径

    Returns:
        按页分节的Markdown内容
    """
    pdf_path = _check_exists(pdf_path)
    logger.info(f"开始PyMuPDF4LLM解析: {pdf_path}")

    page_chunks = pymupdf4llm.to_markdown(doc=str(pdf_path), page_chunks=True)

    markdown_parts = []
    for page_idx, page_data in enumerate(page_chunks):
        page_text = page_data.get('text', '') if isinstance(page_data, dict) else str(page_data)
        if page_text and page_text.strip():
            markdown_parts.append(f"# Page {page_idx + 1}\n\n{page_text.strip()}")

    if not markdown_parts:
        raise OfficeSkillError("PDF文档无有效文本内容", FailureType.PARSE_ERROR)

    logger.info(f"PDF转Markdown成功 - 页数: {len(page_chunks)}")
    return "\n\n".join(markdown_parts)


def merge_pdfs(pdf_paths: Sequence[Union[str, Path]], output_path: Union[str, Path]) -> Path:
    """按顺序合并多个PDF"""
    writer = PdfWriter()
    for pdf_path in pdf_paths:
        for page in _reader(pdf_path).pages:
            writer.add_page(page)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wb") as f:
        writer.write(f)

    logger.info(f"合并 {len(pdf_paths)} 个PDF -> {output_path}")
    return output_path


def split_pdf(pdf_path: Union[str, Path], output_dir: Union[str, Path]) -> List[Path]:
    """将PDF拆分为单页文件 page-<n>.pdf"""
    reader = _reader(pdf_path)
    os.makedirs(output_dir, exist_ok=True)

    outputs = []
    for page_number, page in enumerate(reader.pages, 1):
        writer = PdfWriter()
        writer.add_page(page)
        path = Path(output_dir) / f"page-{page_number}.pdf"
        with open(path, "wb") as f:
            writer.write(f)
        outputs.append(path)
    return outputs
