"""
PDF表格提取
使用pdfplumber检测表格，并提供合并单元格填充、列数规范化和跨页表格拼接
"""

from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

import pandas as pd
import pdfplumber

from ..config import TABLE_STRATEGIES
from ..models import ExtractedTable, OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.pdf.tables")

Table = List[List[str]]


def clean_cell(value: Any) -> str:
    """单元格值转字符串：None 视为空，换行合并为空格"""
    if value is None:
        return ""
    return " ".join(str(value).split("\n")).strip()


def fill_merged_cells(row: Sequence[str]) -> List[str]:
    """
    填充横向合并单元格

    pdfplumber 将合并单元格识别为一个有值的单元格加若干空单元格，
    这里在行内从左到右用最近的非空值填充空单元格。行首的空单元格保持为空。
    """
    filled = []
    last_value = ""
    for cell in row:
        if cell:
            last_value = cell
            filled.append(cell)
        else:
            filled.append(last_value)
    return filled


def normalize_columns(table: Sequence[Sequence[str]]) -> Table:
    """用空字符串把每一行补齐到最大列数"""
    if not table:
        return []
    width = max(len(row) for row in table)
    return [list(row) + [""] * (width - len(row)) for row in table]


def clean_table(table: Sequence[Sequence[Any]], fill_merged: bool = False) -> Table:
    """
    清理pdfplumber返回的原始表格

    Args:
        table: 原始表格（单元格可能为None）
        fill_merged: 是否填充横向合并单元格

    Returns:
        列数一致的字符串表格
    """
    rows = [[clean_cell(cell) for cell in row] for row in table if row is not None]
    if fill_merged:
        rows = [fill_merged_cells(row) for row in rows]
    return normalize_columns(rows)


def _table_settings(strategy: str) -> dict:
    settings = TABLE_STRATEGIES.get(strategy)
    if settings is None:
        raise OfficeSkillError(
            f"未知的表格检测策略: {strategy}，可选: {', '.join(TABLE_STRATEGIES)}",
            FailureType.VALIDATION_ERROR
        )
    return dict(settings)


def _open_pdf(pdf_path: Union[str, Path]):
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise OfficeSkillError(f"文件不存在: {pdf_path}", FailureType.FILE_NOT_FOUND)
    try:
        return pdfplumber.open(str(pdf_path))
    except Exception as e:
        raise OfficeSkillError(f"无法打开PDF文件: {pdf_path}, 错误: {e}", FailureType.INVALID_FILE_FORMAT)


def extract_tables(pdf_path: Union[str, Path], strategy: str = "lines",
                   pages: Optional[Iterable[int]] = None,
                   fill_merged: bool = False) -> List[ExtractedTable]:
    """
    提取PDF中的所有表格

    Args:
        pdf_path: PDF文件路径
        strategy: 检测策略，lines（有框线表格）或 text（无框线表格）
        pages: 需要处理的页码（从1开始），None表示全部页面
        fill_merged: 是否填充横向合并单元格

    Returns:
        按页码和页内顺序排列的表格列表
    """
    settings = _table_settings(strategy)
    wanted = set(pages) if pages else None
    tables = []

    with _open_pdf(pdf_path) as pdf:
        for page_number, page in enumerate(pdf.pages, 1):
            if wanted is not None and page_number not in wanted:
                continue

            for table_index, raw_table in enumerate(page.extract_tables(settings)):
                rows = clean_table(raw_table, fill_merged=fill_merged)
                if not rows:
                    continue
                tables.append(ExtractedTable(
                    page_number=page_number,
                    table_index=table_index,
                    rows=rows
                ))

    logger.info(f"从 {Path(pdf_path).name} 提取到 {len(tables)} 个表格（策略: {strategy}）")
    if not tables and strategy == "lines":
        logger.info("未检测到表格，无框线表格可尝试 strategy='text'")
    return tables


def stitch_tables(first_tables: Iterable[Optional[Sequence[Sequence[str]]]]) -> Table:
    """
    拼接跨页表格

    按输入顺序扫描每页的第一个表格：第一张表的首行作为表头；之后的表格
    如果首行与表头完全相等，则只追加其余行，否则追加全部行。

    Args:
        first_tables: 每页检测到的第一个表格，没有表格的页面为None

    Returns:
        拼接后的表格
    """
    header = None
    stitched: Table = []

    for table in first_tables:
        if not table:
            continue
        rows = [list(row) for row in table]
        if header is None:
            header = rows[0]
            stitched.extend(rows)
        elif rows[0] == header:
            stitched.extend(rows[1:])
        else:
            stitched.extend(rows)

    return stitched


def extract_multipage_table(pdf_path: Union[str, Path], strategy: str = "lines",
                            fill_merged: bool = False) -> Table:
    """提取跨越多页的表格（每页取第一个检测到的表格）"""
    settings = _table_settings(strategy)
    first_tables = []

    with _open_pdf(pdf_path) as pdf:
        for page in pdf.pages:
            page_tables = page.extract_tables(settings)
            first_tables.append(clean_table(page_tables[0], fill_merged) if page_tables else None)

    stitched = normalize_columns(stitch_tables(first_tables))
    logger.info(f"跨页表格拼接完成: {len(first_tables)} 页, {len(stitched)} 行")
    return stitched


def table_to_dataframe(table: Sequence[Sequence[str]], header: bool = True) -> pd.DataFrame:
    """将表格转换为 DataFrame，header 为 True 时首行作为列名"""
    rows = normalize_columns(table)
    if not rows:
        return pd.DataFrame()
    if header:
        return pd.DataFrame(rows[1:], columns=rows[0])
    return pd.DataFrame(rows)


def export_tables(tables: Sequence[ExtractedTable], output_dir: Union[str, Path],
                  fmt: str = "csv") -> List[Path]:
    """
    导出表格

    Args:
        tables: extract_tables 的结果
        output_dir: 输出目录
        fmt: csv（每个表格一个文件）或 xlsx（一个工作簿，每个表格一个工作表）

    Returns:
        生成的文件路径列表
    """
    if fmt not in ("csv", "xlsx"):
        raise OfficeSkillError(f"不支持的导出格式: {fmt}", FailureType.VALIDATION_ERROR)
    if not tables:
        return []

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if fmt == "csv":
        paths = []
        for table in tables:
            path = output_dir / f"page-{table.page_number}-table-{table.table_index + 1}.csv"
            table_to_dataframe(table.rows).to_csv(path, index=False)
            paths.append(path)
        return paths

    path = output_dir / "tables.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for table in tables:
            sheet_name = f"Page{table.page_number}_Table{table.table_index + 1}"
            table_to_dataframe(table.rows).to_excel(writer, sheet_name=sheet_name, index=False)
    return [path]
