"""
Excel内容读取
将工作簿转换为Markdown表格，便于代理阅读
"""

from pathlib import Path
from typing import Union

import pandas as pd

from ..models import OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.spreadsheet.reader")


def workbook_to_markdown(file_path: Union[str, Path]) -> str:
    """
    使用 pandas 将 Excel 文件转换为 Markdown 表格格式

    Args:
        file_path: Excel文件路径

    Returns:
        Markdown格式的内容，每个非空工作表一节
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise OfficeSkillError(f"文件不存在: {file_path}", FailureType.FILE_NOT_FOUND)

    logger.info(f"使用pandas转换Excel文件为Markdown: {file_path}")

    try:
        sheets = pd.read_excel(file_path, sheet_name=None)
    except Exception as e:
        raise OfficeSkillError(f"Excel解析失败: {e}", FailureType.PARSE_ERROR)

    markdown_parts = []
    for sheet_name, df in sheets.items():
        # 跳过空工作表
        if df.empty:
            continue
        markdown_parts.append(f"## {sheet_name}")
        markdown_parts.append("")
        markdown_parts.append(df.to_markdown(index=False, tablefmt='github'))
        markdown_parts.append("")

    if not markdown_parts:
        logger.warning("Excel文件中没有有效数据")
        return "*No data*"

    logger.info(f"Excel转Markdown成功，处理了 {len(sheets)} 个工作表")
    return "\n".join(markdown_parts).rstrip() + "\n"
