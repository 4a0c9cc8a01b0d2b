"""
输出目录约定
生成的文件统一放在 outputs/<document-name>/ 下，目录名小写并以连字符分隔
"""

import re
from pathlib import Path
from typing import Union

from .config import OUTPUT_ROOT_DIR
from .utils import get_logger

logger = get_logger("office_skills.outputs")

_GITIGNORE_CONTENT = "*\n!.gitignore\n"


def slugify_document_name(name: Union[str, Path]) -> str:
    """
    将文档名转换为输出目录名

    >>> slugify_document_name("Q3 Financial_Report.xlsx")
    'q3-financial-report'
    """
    stem = Path(str(name)).stem
    slug = re.sub(r'[\W_]+', '-', stem.lower()).strip('-')
    return slug or "document"


def ensure_output_root(root: Union[str, Path, None] = None) -> Path:
    """创建输出根目录，并写入 .gitignore 使生成的文件不进入版本控制"""
    root_path = Path(root or OUTPUT_ROOT_DIR)
    root_path.mkdir(parents=True, exist_ok=True)

    gitignore = root_path / ".gitignore"
    if not gitignore.exists():
        gitignore.write_text(_GITIGNORE_CONTENT, encoding="utf-8")
        logger.debug(f"写入输出目录 .gitignore: {gitignore}")

    return root_path


def get_output_dir(document_name: Union[str, Path], root: Union[str, Path, None] = None,
                   create: bool = True) -> Path:
    """
    获取文档对应的输出目录

    Args:
        document_name: 文档名或文档路径
        root: 输出根目录，默认使用 OFFICE_SKILLS_OUTPUT_DIR
        create: 是否创建目录

    Returns:
        输出目录路径
    """
    root_path = ensure_output_root(root) if create else Path(root or OUTPUT_ROOT_DIR)
    output_dir = root_path / slugify_document_name(document_name)
    if create:
        output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
