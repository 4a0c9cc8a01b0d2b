"""
DOCX文档工具
pandoc 负责与Markdown互转，python-docx 负责直接读取，LibreOffice 负责格式转换
"""

from pathlib import Path
from typing import Union
from zipfile import BadZipFile

import docx
from docx.opc.exceptions import PackageNotFoundError

from ..converters import pandoc
from ..converters.libreoffice import convert_document, convert_legacy_format
from ..models import OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.docx")

TRACK_CHANGES_MODES = ('accept', 'reject', 'all')


def docx_to_markdown(file_path: Union[str, Path], media_dir: Union[str, Path, None] = None,
                     track_changes: str = "accept") -> str:
    """
    将DOCX转换为Markdown

    Args:
        file_path: DOCX文件路径
        media_dir: 图片提取目录
        track_changes: 修订处理方式，accept/reject/all（all 保留修订标记）

    Returns:
        Markdown内容
    """
    if track_changes not in TRACK_CHANGES_MODES:
        raise OfficeSkillError(
            f"track_changes 必须是 {'/'.join(TRACK_CHANGES_MODES)} 之一",
            FailureType.VALIDATION_ERROR
        )
    return pandoc.convert_to_markdown(
        file_path,
        media_dir=media_dir,
        from_format='docx',
        extra_args=[f'--track-changes={track_changes}'],
    )


def markdown_to_docx(markdown_path: Union[str, Path], output_path: Union[str, Path],
                     reference_doc: Union[str, Path, None] = None) -> Path:
    """将Markdown转换为DOCX，可指定样式参考文档"""
    return pandoc.convert_from_markdown(markdown_path, output_path, to_format='docx',
                                        reference_doc=reference_doc)


def extract_docx_text(file_path: Union[str, Path]) -> str:
    """
    使用python-docx提取正文段落和表格文本

    表格按行输出，单元格以 " | " 分隔
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise OfficeSkillError(f"文件不存在: {file_path}", FailureType.FILE_NOT_FOUND)
    try:
        document = docx.Document(str(file_path))
    except (PackageNotFoundError, BadZipFile) as e:
        raise OfficeSkillError(f"无法打开DOCX文件: {e}", FailureType.INVALID_FILE_FORMAT)

    parts = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]

    for table in document.tables:
        parts.append("")
        for row in table.rows:
            parts.append(" | ".join(cell.text.strip() for cell in row.cells))

    return "\n".join(parts).strip()


def docx_to_pdf(file_path: Union[str, Path], output_dir: Union[str, Path, None] = None) -> Path:
    """使用LibreOffice将DOCX导出为PDF"""
    return convert_document(file_path, 'pdf', output_dir)


def upgrade_legacy_doc(file_path: Union[str, Path], output_dir: Union[str, Path, None] = None) -> Path:
    """将 .doc 转换为 .docx"""
    if Path(file_path).suffix.lower() != '.doc':
        raise OfficeSkillError(f"不是 .doc 文件: {file_path}", FailureType.INVALID_FILE_FORMAT)
    logger.info(f"检测到旧格式 .doc，使用LibreOffice转换: {file_path}")
    return convert_legacy_format(file_path, output_dir)
