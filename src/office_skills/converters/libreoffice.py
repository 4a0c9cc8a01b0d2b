"""
LibreOffice 转换工具
提供 headless 模式下的格式转换和宏执行
"""

import os
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from ..config import LIBREOFFICE_COMMANDS, LEGACY_FORMAT_MAPPING, CONVERSION_TIMEOUT
from ..models import OfficeSkillError, ToolNotFoundError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.libreoffice")


def run_soffice(args: List[str], timeout: Optional[int] = CONVERSION_TIMEOUT) -> subprocess.CompletedProcess:
    """
    依次尝试可用的 LibreOffice 命令执行参数

    Args:
        args: soffice 之后的命令行参数
        timeout: 超时秒数，原样传给 subprocess

    Returns:
        执行完成的进程对象（不检查返回码）
    """
    for lo_cmd in LIBREOFFICE_COMMANDS:
        cmd = [lo_cmd] + list(args)
        try:
            logger.debug(f"尝试使用命令: {' '.join(cmd)}")
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout
            )
        except FileNotFoundError:
            logger.debug(f"命令 {lo_cmd} 未找到")
            continue
        except subprocess.TimeoutExpired:
            logger.warning(f"LibreOffice执行超时({timeout}s): {lo_cmd}")
            raise OfficeSkillError(f"LibreOffice执行超时({timeout}秒)", FailureType.TIMEOUT)

    raise ToolNotFoundError("未找到可用的LibreOffice命令，请安装: sudo apt-get install libreoffice")


def convert_document(input_path: Union[str, Path], target_format: str,
                     output_dir: Union[str, Path, None] = None,
                     timeout: Optional[int] = CONVERSION_TIMEOUT) -> Path:
    """
    使用 LibreOffice 转换文档格式

    Args:
        input_path: 输入文件路径
        target_format: 目标格式，如 pdf/docx/xlsx/pptx
        output_dir: 输出目录，默认为输入文件所在目录
        timeout: 超时秒数

    Returns:
        转换后的文件路径
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise OfficeSkillError(f"文件不存在: {input_path}", FailureType.FILE_NOT_FOUND)

    target_format = target_format.lstrip('.')
    output_dir = Path(output_dir) if output_dir else input_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"使用LibreOffice转换 {input_path.name} -> {target_format}")

    # 独立的用户配置目录，避免与正在运行的 LibreOffice 实例冲突
    with tempfile.TemporaryDirectory(prefix="lo_profile_") as profile_dir:
        result = run_soffice([
            f"-env:UserInstallation=file://{os.path.abspath(profile_dir)}",
            '--headless',
            '--convert-to', target_format,
            '--outdir', str(output_dir.resolve()),
            str(input_path.resolve()),
        ], timeout=timeout)

    if result.returncode != 0:
        error_msg = result.stderr or "未知错误"
        logger.error(f"LibreOffice转换失败: {error_msg}")
        raise OfficeSkillError(f"LibreOffice转换失败: {error_msg}", FailureType.CONVERSION_ERROR)

    target_file = output_dir / f"{input_path.stem}.{target_format}"
    if not target_file.exists():
        raise OfficeSkillError(f"转换后的文件不存在: {target_file}", FailureType.CONVERSION_ERROR)

    logger.info(f"LibreOffice转换成功: {target_file}")
    return target_file


def convert_legacy_format(file_path: Union[str, Path],
                          output_dir: Union[str, Path, None] = None) -> Path:
    """将 .doc/.xls/.ppt 旧格式转换为对应的 OOXML 格式"""
    extension = Path(file_path).suffix.lower()
    target = LEGACY_FORMAT_MAPPING.get(extension)
    if not target:
        raise OfficeSkillError(f"不支持的旧格式: {extension}", FailureType.INVALID_FILE_FORMAT)
    return convert_document(file_path, target, output_dir)
