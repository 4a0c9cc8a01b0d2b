"""
Excel公式重新计算
通过 LibreOffice headless 宏重新计算并保存工作簿，然后扫描公式错误
"""

import os
import platform
from collections import OrderedDict
from pathlib import Path
from typing import Optional, Union

from openpyxl import load_workbook

from ..config import (
    FORMULA_ERROR_CODES,
    DEFAULT_RECALC_TIMEOUT,
    MAX_ERROR_LOCATIONS,
    RECALC_MACRO_NAME,
    RECALC_MACRO_URL,
)
from ..converters.libreoffice import run_soffice
from ..models import RecalcResult, ErrorLocations, OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.recalc")

MACRO_CONTENT = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE script:module PUBLIC "-//OpenOffice.org//DTD OfficeDocument 1.0//EN" "module.dtd">
<script:module xmlns:script="http://openoffice.org/2000/script" script:name="Module1" script:language="StarBasic">
    Sub RecalculateAndSave()
      ThisComponent.calculateAll()
      ThisComponent.store()
      ThisComponent.close(True)
    End Sub
</script:module>"""


def get_macro_dir() -> Path:
    """LibreOffice 用户 Basic 标准库目录"""
    if platform.system() == 'Darwin':
        return Path(os.path.expanduser('~/Library/Application Support/LibreOffice/4/user/basic/Standard'))
    return Path(os.path.expanduser('~/.config/libreoffice/4/user/basic/Standard'))


def setup_libreoffice_macro(macro_dir: Union[str, Path, None] = None) -> bool:
    """
    安装重新计算宏（已安装时直接返回）

    Args:
        macro_dir: 宏目录，默认当前平台的用户配置目录

    Returns:
        宏是否可用
    """
    macro_dir = Path(macro_dir) if macro_dir else get_macro_dir()
    macro_file = macro_dir / 'Module1.xba'

    if macro_file.exists() and RECALC_MACRO_NAME in macro_file.read_text(encoding='utf-8', errors='ignore'):
        return True

    if not macro_dir.exists():
        # 首次运行，先让 LibreOffice 生成用户配置
        logger.info("初始化LibreOffice用户配置目录")
        run_soffice(['--headless', '--terminate_after_init'], timeout=10)
        macro_dir.mkdir(parents=True, exist_ok=True)

    try:
        macro_file.write_text(MACRO_CONTENT, encoding='utf-8')
    except OSError as e:
        logger.error(f"写入LibreOffice宏失败: {macro_file}, 错误: {e}")
        return False

    logger.info(f"已安装LibreOffice重新计算宏: {macro_file}")
    return True


def count_formulas(file_path: Union[str, Path]) -> int:
    """统计所有工作表中的公式单元格数量"""
    wb = load_workbook(file_path, data_only=False)
    try:
        return sum(
            1
            for ws in wb.worksheets
            for row in ws.iter_rows()
            for cell in row
            if cell.data_type == 'f'
        )
    finally:
        wb.close()


def scan_formula_errors(file_path: Union[str, Path],
                        max_locations: int = MAX_ERROR_LOCATIONS) -> RecalcResult:
    """
    扫描工作簿中的公式错误

    读取公式的缓存计算值（需先重新计算），单元格值等于错误码之一即计为错误。

    Args:
        file_path: 工作簿路径
        max_locations: 每种错误最多记录的位置数

    Returns:
        扫描结果
    """
    file_path = Path(file_path)
    try:
        wb = load_workbook(file_path, data_only=True)
    except Exception as e:
        raise OfficeSkillError(f"无法读取工作簿: {file_path}, 错误: {e}", FailureType.INVALID_FILE_FORMAT)

    counts = OrderedDict((code, 0) for code in FORMULA_ERROR_CODES)
    locations = {code: [] for code in FORMULA_ERROR_CODES}

    try:
        for ws in wb.worksheets:
            for row in ws.iter_rows():
                for cell in row:
                    # 缓存值必须与错误代码完全一致
                    code = cell.value
                    if not isinstance(code, str) or code not in counts:
                        continue
                    counts[code] += 1
                    if len(locations[code]) < max_locations:
                        locations[code].append(f"{ws.title}!{cell.coordinate}")
    finally:
        wb.close()

    total_errors = sum(counts.values())
    error_summary = {
        code: ErrorLocations(count=count, locations=locations[code])
        for code, count in counts.items() if count
    }

    return RecalcResult(
        status='success' if total_errors == 0 else 'errors_found',
        total_errors=total_errors,
        total_formulas=count_formulas(file_path),
        error_summary=error_summary,
    )


def recalc(file_path: Union[str, Path], timeout: Optional[int] = DEFAULT_RECALC_TIMEOUT) -> RecalcResult:
    """
    重新计算工作簿中的全部公式并报告错误

    只报告错误，不做自动修复

    Args:
        file_path: Excel文件路径
        timeout: LibreOffice 执行超时秒数

    Returns:
        重新计算后的错误扫描结果
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise OfficeSkillError(f"文件不存在: {file_path}", FailureType.FILE_NOT_FOUND)

    if not setup_libreoffice_macro():
        raise OfficeSkillError("LibreOffice宏安装失败", FailureType.OTHER)

    logger.info(f"开始重新计算: {file_path}, 超时: {timeout}s")
    result = run_soffice(
        ['--headless', '--norestore', RECALC_MACRO_URL, str(file_path.resolve())],
        timeout=timeout
    )
    if result.returncode != 0:
        error_msg = result.stderr or "未知错误"
        logger.error(f"LibreOffice重新计算失败: {error_msg}")
        raise OfficeSkillError(f"LibreOffice重新计算失败: {error_msg}", FailureType.CONVERSION_ERROR)

    scan = scan_formula_errors(file_path)
    logger.info(f"重新计算完成: 公式 {scan.total_formulas} 个, 错误 {scan.total_errors} 个")
    return scan
