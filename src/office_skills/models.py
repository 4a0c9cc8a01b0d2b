"""
Office Skills 数据模型与错误类型
"""

import re
from enum import Enum
from typing import List, Optional, Dict, Literal

from pydantic import BaseModel, Field, field_validator


class FailureType(str, Enum):
    """失败类型枚举"""

    # 环境相关错误
    TOOL_NOT_FOUND = "tool_not_found"        # 外部工具未安装
    TIMEOUT = "timeout"                      # 外部命令超时

    # 文件相关错误
    FILE_NOT_FOUND = "file_not_found"        # 文件不存在
    INVALID_FILE_FORMAT = "invalid_file_format"    # 无效文件格式

    # 处理相关错误
    CONVERSION_ERROR = "conversion_error"    # 外部转换失败
    PARSE_ERROR = "parse_error"              # 文件解析错误
    OCR_ERROR = "ocr_error"                  # OCR识别错误
    VALIDATION_ERROR = "validation_error"    # 输入参数校验失败

    OTHER = "other"                          # 其他未分类错误


class OfficeSkillError(Exception):
    """文档工作流错误，携带失败类型"""

    def __init__(self, message: str, failure_type: FailureType = FailureType.OTHER):
        super().__init__(message)
        self.message = message
        self.failure_type = failure_type

    def to_dict(self) -> Dict[str, str]:
        """转换为命令行和MCP工具输出的错误结构"""
        return {"error": self.message, "type": self.failure_type.value}


class ToolNotFoundError(OfficeSkillError):
    """外部可执行文件缺失"""

    def __init__(self, message: str):
        super().__init__(message, FailureType.TOOL_NOT_FOUND)


# ============================
# 公式重新计算
# ============================

class ErrorLocations(BaseModel):
    """某一种公式错误的统计"""
    count: int = Field(description="出现次数")
    locations: List[str] = Field(default_factory=list, description="单元格位置，如 Sheet1!B5")


class RecalcResult(BaseModel):
    """公式重新计算与错误扫描结果"""
    status: Literal["success", "errors_found"] = Field(description="是否发现错误")
    total_errors: int = Field(default=0, description="错误总数")
    total_formulas: int = Field(default=0, description="公式总数")
    error_summary: Dict[str, ErrorLocations] = Field(
        default_factory=dict,
        description="按错误码分组的统计，仅包含出现过的错误码"
    )


# ============================
# PDF
# ============================

class ExtractedTable(BaseModel):
    """从PDF页面检测到的表格"""
    page_number: int = Field(description="页码（从1开始）")
    table_index: int = Field(description="页面内的表格序号（从0开始）")
    rows: List[List[str]] = Field(default_factory=list, description="表格行")


class PageText(BaseModel):
    """PDF页面文本"""
    page_number: int
    text: str = ""


class OcrPage(BaseModel):
    """单页OCR结果"""
    page_number: int = Field(description="页码（从1开始）")
    text: str = Field(default="", description="识别出的文本")
    cached: bool = Field(default=False, description="是否来自缓存")


class OcrResult(BaseModel):
    """PDF OCR结果"""
    source: str = Field(description="源文件路径")
    language: str = Field(description="识别语言")
    dpi: int = Field(description="栅格化分辨率")
    pages: List[OcrPage] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """合并所有页面的文本"""
        return "\n\n".join(page.text for page in self.pages if page.text)


# ============================
# 演示文稿
# ============================

_HEX_COLOR = re.compile(r'^[0-9A-F]{6}$')


class ParagraphSpec(BaseModel):
    """段落内容与格式，盘点输出和替换输入共用"""
    text: str = Field(default="", description="段落文本")
    bullet: Optional[bool] = Field(default=None, description="是否为项目符号")
    level: Optional[int] = Field(default=None, ge=0, le=8, description="缩进级别")
    alignment: Optional[str] = Field(default=None, description="对齐方式，如 LEFT/CENTER/RIGHT/JUSTIFY")
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    font_size: Optional[float] = Field(default=None, description="字号（磅）")
    font_name: Optional[str] = None
    color: Optional[str] = Field(default=None, description="RGB十六进制颜色，如 FF0000")

    @field_validator("alignment")
    @classmethod
    def _upper_alignment(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.lstrip('#').upper()
        if not _HEX_COLOR.match(value):
            raise ValueError(f"颜色必须是6位十六进制RGB值: {value}")
        return value


class ShapeInfo(BaseModel):
    """包含文本的形状"""
    shape_id: int
    name: str
    left: float = Field(description="左边距（英寸）")
    top: float = Field(description="上边距（英寸）")
    width: float = Field(description="宽度（英寸）")
    height: float = Field(description="高度（英寸）")
    placeholder_type: Optional[str] = Field(default=None, description="占位符类型，如 TITLE/BODY")
    paragraphs: List[ParagraphSpec] = Field(default_factory=list)


class ShapeReplacement(BaseModel):
    """单个形状的替换内容"""
    paragraphs: List[ParagraphSpec] = Field(default_factory=list)


# ============================
# 环境与技能
# ============================

class ToolStatus(BaseModel):
    """系统工具可用性"""
    name: str
    available: bool
    path: Optional[str] = None
    required: bool = True
    package: str = Field(description="apt 安装包名")
    purpose: str = ""


class SkillMetadata(BaseModel):
    """技能元数据（始终可见的第一层信息）"""
    id: str
    name: str
    description: str = ""
    resources: List[str] = Field(default_factory=list, description="可按需加载的附加资源")
