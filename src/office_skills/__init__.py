"""
Office文档技能模块
提供 xlsx/pptx/pdf/docx 工作流的辅助脚本和技能文档
"""

from .models import FailureType, OfficeSkillError, ToolNotFoundError, RecalcResult
from .outputs import get_output_dir, slugify_document_name
from .skills import SkillRegistry, get_registry

__version__ = "1.0.0"

__all__ = [
    "FailureType",
    "OfficeSkillError",
    "ToolNotFoundError",
    "RecalcResult",
    "get_output_dir",
    "slugify_document_name",
    "SkillRegistry",
    "get_registry",
]
