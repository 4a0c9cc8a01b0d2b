"""
Excel格式化工具
条件格式、财务模型字体颜色约定和数据透视表
"""

from copy import copy
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd
from openpyxl.formatting.rule import CellIsRule, ColorScaleRule
from openpyxl.styles import Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from ..models import OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.formatting")

# 财务模型字体颜色约定
INPUT_COLOR = "0000FF"        # 硬编码输入：蓝色
FORMULA_COLOR = "000000"      # 公式：黑色
LINK_COLOR = "008000"         # 引用其他工作表的公式：绿色

CELL_OPERATORS = [
    'between', 'notBetween', 'equal', 'notEqual',
    'greaterThan', 'lessThan', 'greaterThanOrEqual', 'lessThanOrEqual',
]


def add_cell_rule(ws: Worksheet, cell_range: str, operator: str, formula: Sequence[str],
                  fill_color: str, font_color: Optional[str] = None) -> None:
    """
    添加单元格值条件格式

    Args:
        ws: 工作表
        cell_range: 单元格范围，如 B2:B20
        operator: 比较运算符，如 lessThan/between
        formula: 比较值公式列表，如 ['0'] 或 ['10', '20']
        fill_color: 填充颜色（RGB十六进制）
        font_color: 字体颜色
    """
    if operator not in CELL_OPERATORS:
        raise OfficeSkillError(f"不支持的条件运算符: {operator}", FailureType.VALIDATION_ERROR)

    fill = PatternFill(start_color=fill_color, end_color=fill_color, fill_type='solid')
    font = Font(color=font_color) if font_color else None
    ws.conditional_formatting.add(
        cell_range,
        CellIsRule(operator=operator, formula=list(formula), fill=fill, font=font)
    )


def add_color_scale(ws: Worksheet, cell_range: str, start_color: str = "F8696B",
                    end_color: str = "63BE7B", mid_color: Optional[str] = None) -> None:
    """添加二色或三色色阶"""
    if mid_color:
        rule = ColorScaleRule(
            start_type='min', start_color=start_color,
            mid_type='percentile', mid_value=50, mid_color=mid_color,
            end_type='max', end_color=end_color
        )
    else:
        rule = ColorScaleRule(
            start_type='min', start_color=start_color,
            end_type='max', end_color=end_color
        )
    ws.conditional_formatting.add(cell_range, rule)


def apply_color_convention(ws: Worksheet) -> Dict[str, int]:
    """
    按财务模型约定设置字体颜色

    数值常量为输入（蓝色），公式为黑色，引用其他工作表的公式为绿色。
    保留原有字体的其他属性。

    Returns:
        每类单元格的数量
    """
    counts = {"inputs": 0, "formulas": 0, "links": 0}

    for row in ws.iter_rows():
        for cell in row:
            if cell.data_type == 'f':
                is_link = '!' in str(cell.value)
                color = LINK_COLOR if is_link else FORMULA_COLOR
                counts["links" if is_link else "formulas"] += 1
            elif isinstance(cell.value, (int, float)) and not isinstance(cell.value, bool):
                color = INPUT_COLOR
                counts["inputs"] += 1
            else:
                continue
            font = copy(cell.font)
            font.color = color
            cell.font = font

    logger.debug(f"{ws.title} 颜色约定: {counts}")
    return counts


def build_pivot(df: pd.DataFrame, index: Union[str, List[str]], values: Union[str, List[str]],
                columns: Union[str, List[str], None] = None, aggfunc: str = "sum") -> pd.DataFrame:
    """使用 pandas 生成数据透视表"""
    missing = [
        name for name in _as_list(index) + _as_list(values) + _as_list(columns)
        if name not in df.columns
    ]
    if missing:
        raise OfficeSkillError(f"数据中不存在的列: {missing}", FailureType.VALIDATION_ERROR)

    return pd.pivot_table(df, index=index, values=values, columns=columns, aggfunc=aggfunc)


def _as_list(value) -> list:
    if value is None:
        return []
    return [value] if isinstance(value, str) else list(value)


def write_dataframe(file_path: Union[str, Path], df: pd.DataFrame, sheet_name: str,
                    index: bool = True) -> Path:
    """
    将 DataFrame 写入工作簿中的工作表（已存在同名工作表时替换）

    Args:
        file_path: 工作簿路径，不存在时新建
        df: 数据
        sheet_name: 工作表名
        index: 是否写入索引

    Returns:
        工作簿路径
    """
    file_path = Path(file_path)
    if file_path.exists():
        with pd.ExcelWriter(file_path, engine="openpyxl", mode="a", if_sheet_exists="replace") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=index)
    else:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(file_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=index)

    logger.info(f"写入工作表 {sheet_name} -> {file_path}")
    return file_path

