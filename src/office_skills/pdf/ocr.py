"""
扫描版PDF的OCR流水线
pdf2image 栅格化页面，pytesseract 识别文字，单页结果写入OCR缓存
"""

from pathlib import Path
from typing import Optional, Union

import pytesseract
from pdf2image import convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
from PIL import Image

from ..config import OCR_LANGUAGE, OCR_DPI
from ..models import OcrPage, OcrResult, OfficeSkillError, ToolNotFoundError, FailureType
from ..ocr_cache import get_ocr_cache
from ..utils import get_logger, normalize_content
from .text import page_count

logger = get_logger("office_skills.pdf.ocr")


def preprocess_image(image: Image.Image, threshold: Optional[int] = None) -> Image.Image:
    """
    OCR前的图像预处理：转灰度，可选二值化

    Args:
        image: 页面图像
        threshold: 二值化阈值(0-255)，None表示不二值化
    """
    gray = image.convert("L")
    if threshold is None:
        return gray
    return gray.point(lambda value: 255 if value > threshold else 0)


def ocr_image(image: Image.Image, lang: str = OCR_LANGUAGE, config: str = "") -> str:
    """识别单张图像中的文字"""
    try:
        text = pytesseract.image_to_string(image, lang=lang, config=config)
    except pytesseract.TesseractNotFoundError:
        raise ToolNotFoundError("未找到tesseract，请安装: sudo apt-get install tesseract-ocr")
    except pytesseract.TesseractError as e:
        raise OfficeSkillError(f"OCR识别失败: {e}", FailureType.OCR_ERROR)
    return normalize_content(text)


def _rasterize_page(pdf_path: Path, page_number: int, dpi: int) -> Image.Image:
    try:
        images = convert_from_path(str(pdf_path), dpi=dpi, first_page=page_number, last_page=page_number)
    except PDFInfoNotInstalledError:
        raise ToolNotFoundError("未找到poppler，请安装: sudo apt-get install poppler-utils")
    except (PDFPageCountError, PDFSyntaxError) as e:
        raise OfficeSkillError(f"PDF文件无法栅格化: {e}", FailureType.INVALID_FILE_FORMAT)

    if not images:
        raise OfficeSkillError(f"第 {page_number} 页栅格化结果为空", FailureType.OCR_ERROR)
    return images[0]


def ocr_pdf(pdf_path: Union[str, Path], lang: str = OCR_LANGUAGE, dpi: int = OCR_DPI,
            first_page: Optional[int] = None, last_page: Optional[int] = None,
            preprocess: bool = True, use_cache: bool = True) -> OcrResult:
    """
    对PDF逐页OCR

    识别效果不好时优先提高 dpi（300 以上），或确认已安装对应语言包（如 chi_sim）

    Args:
        pdf_path: PDF文件路径
        lang: tesseract 语言，多个语言用 + 连接，如 eng+chi_sim
        dpi: 栅格化分辨率
        first_page: 起始页码（从1开始）
        last_page: 结束页码（包含）
        preprocess: 是否转灰度
        use_cache: 是否使用OCR缓存

    Returns:
        OCR结果
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise OfficeSkillError(f"文件不存在: {pdf_path}", FailureType.FILE_NOT_FOUND)

    total_pages = page_count(pdf_path)
    start = max(first_page or 1, 1)
    end = min(last_page or total_pages, total_pages)

    cache, file_hash = None, None
    if use_cache:
        try:
            cache = get_ocr_cache()
            file_hash = cache.file_digest(pdf_path)
        except Exception as e:
            # 缓存不可用时不影响识别
            logger.warning(f"OCR缓存不可用，跳过缓存: {e}")
            cache = None

    logger.info(f"开始OCR: {pdf_path.name}, 页码 {start}-{end}, 语言: {lang}, DPI: {dpi}")
    result = OcrResult(source=str(pdf_path), language=lang, dpi=dpi)

    for page_number in range(start, end + 1):
        cache_key = cache.get_cache_key(file_hash, lang, dpi, page_number) if cache else None
        cached_text = cache.get(cache_key) if cache else None
        if cached_text is not None:
            result.pages.append(OcrPage(page_number=page_number, text=cached_text, cached=True))
            continue

        image = _rasterize_page(pdf_path, page_number, dpi)
        if preprocess:
            image = preprocess_image(image)
        text = ocr_image(image, lang=lang)

        if cache:
            cache.set(cache_key, text)
        result.pages.append(OcrPage(page_number=page_number, text=text))
        logger.debug(f"第 {page_number} 页识别完成，文本长度: {len(text)}")

    empty_pages = [page.page_number for page in result.pages if not page.text]
    if empty_pages:
        logger.warning(f"以下页面未识别到文字: {empty_pages}，可尝试提高DPI")

    logger.info(f"OCR完成: {pdf_path.name}, 共 {len(result.pages)} 页")
    return result
