"""
演示文稿工作流模块
文本盘点、文本替换和缩略图
"""

from .inventory import extract_inventory, save_inventory, inventory_to_dict
from .replace import apply_replacements, load_replacements
from .thumbnail import render_thumbnails, build_grid

__all__ = [
    "extract_inventory",
    "save_inventory",
    "inventory_to_dict",
    "apply_replacements",
    "load_replacements",
    "render_thumbnails",
    "build_grid",
]
