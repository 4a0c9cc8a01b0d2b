"""
Office Skills 配置模块
提供外部工具定义、错误码和基本配置
"""

import os
from typing import Dict

from dotenv import load_dotenv
load_dotenv(override=True)

# ============================
# 电子表格公式错误
# ============================

# 重新计算后需要检测的公式错误码（固定集合）
FORMULA_ERROR_CODES = [
    '#REF!',        # 无效的单元格引用
    '#DIV/0!',      # 除以零
    '#VALUE!',      # 公式中的数据类型错误
    '#N/A',         # 查找值不存在
    '#NAME?',       # 无法识别的公式名称
]

# 重新计算默认超时（秒）
DEFAULT_RECALC_TIMEOUT = int(os.getenv("RECALC_TIMEOUT_SECONDS", "30"))

# 每种错误最多返回的单元格位置数量（计数不受影响）
MAX_ERROR_LOCATIONS = int(os.getenv("RECALC_MAX_ERROR_LOCATIONS", "20"))

# LibreOffice 重新计算宏
RECALC_MACRO_NAME = "RecalculateAndSave"
RECALC_MACRO_URL = (
    "vnd.sun.star.script:Standard.Module1.RecalculateAndSave"
    "?language=Basic&location=application"
)

# ============================
# 外部工具定义
# ============================

# LibreOffice 可执行文件候选名称（按顺序尝试）
LIBREOFFICE_COMMANDS = [
    'soffice',
    'libreoffice',
    '/Applications/LibreOffice.app/Contents/MacOS/soffice',
]

# 文档工作流依赖的系统工具
SYSTEM_TOOLS: Dict[str, Dict] = {
    'pandoc': {
        'commands': ['pandoc'],
        'package': 'pandoc',
        'required': True,
        'purpose': 'DOCX与Markdown互相转换',
    },
    'libreoffice': {
        'commands': LIBREOFFICE_COMMANDS,
        'package': 'libreoffice',
        'required': True,
        'purpose': '公式重新计算、格式转换、幻灯片渲染',
    },
    'pdftoppm': {
        'commands': ['pdftoppm'],
        'package': 'poppler-utils',
        'required': True,
        'purpose': 'PDF页面栅格化（OCR与缩略图）',
    },
    'tesseract': {
        'commands': ['tesseract'],
        'package': 'tesseract-ocr',
        'required': True,
        'purpose': '扫描件OCR文字识别',
    },
    'qpdf': {
        'commands': ['qpdf'],
        'package': 'qpdf',
        'required': False,
        'purpose': 'PDF修复与线性化（可选）',
    },
}

# requirements.txt 中的 Python 依赖（导入名 -> 发行包名）
PYTHON_MODULES: Dict[str, str] = {
    'pdfplumber': 'pdfplumber',
    'pypdf': 'pypdf',
    'pymupdf4llm': 'pymupdf4llm',
    'pytesseract': 'pytesseract',
    'pdf2image': 'pdf2image',
    'PIL': 'Pillow',
    'openpyxl': 'openpyxl',
    'pandas': 'pandas',
    'tabulate': 'tabulate',
    'pptx': 'python-pptx',
    'docx': 'python-docx',
    'yaml': 'PyYAML',
    'diskcache': 'diskcache',
}

# 旧格式到新格式的映射
LEGACY_FORMAT_MAPPING = {
    '.doc': '.docx',
    '.xls': '.xlsx',
    '.ppt': '.pptx',
}

# ============================
# 输出目录约定
# ============================

OUTPUT_ROOT_DIR = os.getenv("OFFICE_SKILLS_OUTPUT_DIR", "outputs")

# ============================
# PDF 处理配置
# ============================

OCR_LANGUAGE = os.getenv("OCR_LANGUAGE", "eng")
OCR_DPI = int(os.getenv("OCR_DPI", "300"))

# pdfplumber 表格检测策略
TABLE_STRATEGIES: Dict[str, Dict] = {
    'lines': {
        'vertical_strategy': 'lines',
        'horizontal_strategy': 'lines',
    },
    'text': {
        'vertical_strategy': 'text',
        'horizontal_strategy': 'text',
        'snap_tolerance': 3,
        'join_tolerance': 3,
    },
}

# ============================
# 缩略图配置
# ============================

THUMBNAIL_COLUMNS = int(os.getenv("THUMBNAIL_COLUMNS", "5"))
THUMBNAIL_WIDTH = int(os.getenv("THUMBNAIL_WIDTH", "300"))
THUMBNAIL_DPI = int(os.getenv("THUMBNAIL_DPI", "100"))

# ============================
# 缓存配置
# ============================

CACHE_ROOT_DIR = os.getenv("CACHE_ROOT_DIR", "cache")
OCR_CACHE_SIZE_MB = int(os.getenv("OCR_CACHE_SIZE_MB", "500"))
CACHE_EXPIRE_DAYS = int(os.getenv("CACHE_EXPIRE_DAYS", "90"))

# 外部命令默认超时（秒）
CONVERSION_TIMEOUT = int(os.getenv("CONVERSION_TIMEOUT_SECONDS", "120"))

