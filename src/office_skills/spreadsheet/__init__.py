"""
电子表格工作流模块
"""

from .recalculate import recalc, scan_formula_errors, count_formulas, setup_libreoffice_macro
from .formatting import (
    add_cell_rule,
    add_color_scale,
    apply_color_convention,
    build_pivot,
    write_dataframe,
)
from .reader import workbook_to_markdown

__all__ = [
    "recalc",
    "scan_formula_errors",
    "count_formulas",
    "setup_libreoffice_macro",
    "add_cell_rule",
    "add_color_scale",
    "apply_color_convention",
    "build_pivot",
    "write_dataframe",
    "workbook_to_markdown",
]
