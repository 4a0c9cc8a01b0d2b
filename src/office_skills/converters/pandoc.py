"""
Pandoc转换工具
提供文档与Markdown之间的相互转换
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Union

from ..config import CONVERSION_TIMEOUT
from ..models import OfficeSkillError, ToolNotFoundError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.pandoc")

# 扩展名到 pandoc 输入格式
FORMAT_MAPPING = {
    '.docx': 'docx',
    '.odt': 'odt',
    '.rtf': 'rtf',
    '.csv': 'csv',
    '.epub': 'epub',
    '.html': 'html',
    '.md': 'markdown',
    '.markdown': 'markdown',
}


def _run_pandoc(cmd: List[str], timeout: int) -> str:
    """执行 pandoc 命令并返回标准输出"""
    logger.debug(f"执行pandoc命令: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding='utf-8'
        )
    except FileNotFoundError:
        logger.error("未找到pandoc命令，请确保已安装pandoc")
        raise ToolNotFoundError("未找到pandoc命令，请安装: sudo apt-get install pandoc")
    except subprocess.TimeoutExpired:
        logger.error("pandoc转换超时")
        raise OfficeSkillError(f"pandoc转换超时({timeout}秒)", FailureType.TIMEOUT)

    if result.returncode != 0:
        error_msg = result.stderr or "未知错误"
        logger.error(f"pandoc转换失败: {error_msg}")
        raise OfficeSkillError(f"pandoc转换失败: {error_msg}", FailureType.CONVERSION_ERROR)

    return result.stdout


def convert_to_markdown(file_path: Union[str, Path], media_dir: Union[str, Path, None] = None,
                        from_format: Optional[str] = None, extra_args: Optional[List[str]] = None,
                        timeout: int = CONVERSION_TIMEOUT) -> str:
    """
    使用pandoc将文档转换为Markdown格式

    Args:
        file_path: 输入文件路径
        media_dir: 图片等媒体文件的提取目录，为None时不提取
        from_format: pandoc 输入格式，默认按扩展名推断
        extra_args: 额外的 pandoc 参数
        timeout: 超时秒数

    Returns:
        Markdown内容
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise OfficeSkillError(f"文件不存在: {file_path}", FailureType.FILE_NOT_FOUND)

    logger.info(f"使用pandoc转换文件: {file_path}")

    cmd = [
        'pandoc',
        str(file_path.resolve()),
        '--to', 'markdown',
        '--wrap', 'none',  # 不自动换行
    ]

    from_format = from_format or FORMAT_MAPPING.get(file_path.suffix.lower())
    if from_format:
        cmd.extend(['--from', from_format])

    if media_dir:
        cmd.extend(['--extract-media', str(Path(media_dir).resolve())])

    if extra_args:
        cmd.extend(extra_args)

    markdown_content = _run_pandoc(cmd, timeout).strip()
    if not markdown_content:
        logger.warning("pandoc转换成功但内容为空")
    else:
        logger.info(f"pandoc转换成功，生成Markdown内容长度: {len(markdown_content)}")
    return markdown_content


def convert_from_markdown(markdown_path: Union[str, Path], output_path: Union[str, Path],
                          to_format: Optional[str] = None,
                          reference_doc: Union[str, Path, None] = None,
                          timeout: int = CONVERSION_TIMEOUT) -> Path:
    """
    使用pandoc将Markdown转换为其他格式（默认按输出扩展名推断）

    Args:
        markdown_path: Markdown文件路径
        output_path: 输出文件路径
        to_format: pandoc 输出格式
        reference_doc: 样式参考文档（docx）

    Returns:
        输出文件路径
    """
    markdown_path = Path(markdown_path)
    output_path = Path(output_path)
    if not markdown_path.exists():
        raise OfficeSkillError(f"文件不存在: {markdown_path}", FailureType.FILE_NOT_FOUND)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        'pandoc',
        str(markdown_path.resolve()),
        '--from', 'markdown',
        '-o', str(output_path.resolve()),
    ]
    if to_format:
        cmd.extend(['--to', to_format])
    if reference_doc:
        cmd.extend(['--reference-doc', str(Path(reference_doc).resolve())])

    _run_pandoc(cmd, timeout)
    logger.info(f"pandoc生成文件: {output_path}")
    return output_path
