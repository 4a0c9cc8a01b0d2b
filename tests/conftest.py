"""
测试配置文件
提供测试共享的fixture和配置
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

# 测试日志写入临时目录，避免在仓库中生成 logs/
os.environ["LOG_DIR"] = str(Path(tempfile.gettempdir()) / "office_skills_test_logs")

from openpyxl import Workbook
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import PP_ALIGN
from pptx.util import Inches, Pt
from pypdf import PdfWriter

from office_skills.ocr_cache import OcrCache


@pytest.fixture
def sample_xlsx(tmp_path):
    """
    创建包含公式和错误值的工作簿

    Model!B1, Model!B2, Summary!A1 为公式；
    Model!C1(#DIV/0!), Model!C2(#REF!), Summary!B1(#N/A) 为错误值
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Model"
    ws["A1"] = 10
    ws["A2"] = 0
    ws["B1"] = "=A1/A2"
    ws["B2"] = "=SUM(A1:A2)"
    ws["C1"] = "#DIV/0!"
    ws["C2"] = "#REF!"

    summary = wb.create_sheet("Summary")
    summary["A1"] = "=Model!A1*2"
    summary["B1"] = "#N/A"
    summary["B2"] = "Total #REF! note"

    path = tmp_path / "model.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def clean_xlsx(tmp_path):
    """没有错误值的工作簿"""
    wb = Workbook()
    ws = wb.active
    ws.title = "Data"
    ws.append(["name", "amount"])
    ws.append(["alpha", 1])
    ws.append(["beta", 2])
    ws["C2"] = "=B2*2"

    path = tmp_path / "clean.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def sample_pptx(tmp_path):
    """
    创建示例演示文稿

    slide-0: 标题、两段正文（第二段为2级）、带格式的文本框
    slide-1: 空白（不出现在盘点中）
    slide-2: 组合形状中的文本框
    """
    prs = Presentation()

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Quarterly review"
    body = slide.placeholders[1].text_frame
    body.text = "Revenue up"
    sub = body.add_paragraph()
    sub.text = "Cloud growth"
    sub.level = 1

    box = slide.shapes.add_textbox(Inches(1), Inches(6.5), Inches(4), Inches(0.5))
    paragraph = box.text_frame.paragraphs[0]
    paragraph.alignment = PP_ALIGN.CENTER
    run = paragraph.add_run()
    run.text = "Confidential"
    run.font.bold = True
    run.font.size = Pt(18)
    run.font.color.rgb = RGBColor(0xFF, 0x00, 0x00)

    prs.slides.add_slide(prs.slide_layouts[6])

    slide = prs.slides.add_slide(prs.slide_layouts[6])
    group = slide.shapes.add_group_shape()
    inner = group.shapes.add_textbox(Inches(1), Inches(1), Inches(3), Inches(1))
    inner.text_frame.text = "Grouped note"

    path = tmp_path / "deck.pptx"
    prs.save(str(path))
    return path


def _write_blank_pdf(path: Path, pages: int) -> Path:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    with open(path, "wb") as f:
        writer.write(f)
    return path


@pytest.fixture
def blank_pdf(tmp_path):
    """3页空白PDF"""
    return _write_blank_pdf(tmp_path / "blank.pdf", 3)


@pytest.fixture
def make_pdf(tmp_path):
    """按页数创建空白PDF的工厂"""
    def factory(name: str, pages: int) -> Path:
        return _write_blank_pdf(tmp_path / name, pages)
    return factory


@pytest.fixture
def ocr_cache(tmp_path):
    """临时目录中的OCR缓存，替换全局实例"""
    cache = OcrCache(tmp_path / "ocr_cache")
    with patch("office_skills.pdf.ocr.get_ocr_cache", return_value=cache):
        yield cache
    cache.cache.close()
