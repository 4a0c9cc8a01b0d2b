#!/usr/bin/env python3
"""
MCP Office文档技能服务器
将公式重算、演示文稿盘点、PDF表格/OCR和技能文档作为MCP工具提供
"""

import argparse
import asyncio
import json
import os
import sys
import urllib.parse
from typing import Annotated, Any, List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent, ToolAnnotations

from office_skills import __version__
from office_skills.config import DEFAULT_RECALC_TIMEOUT, OCR_LANGUAGE, OCR_DPI
from office_skills.environment import check_environment, missing_python_modules
from office_skills.models import OfficeSkillError, FailureType
from office_skills.pdf import extract_tables, ocr_pdf
from office_skills.presentation import extract_inventory, inventory_to_dict
from office_skills.skills import get_registry
from office_skills.spreadsheet import recalc
from office_skills.utils import get_logger

SERVER_INFO = {
    "name": "OfficeSkillsServer",
    "version": __version__,
    "instructions": (
        "这个服务器提供Office文档工作流工具：Excel公式重算与错误扫描、PPTX文本盘点、"
        f"PDF表格提取与OCR，以及 docx/pdf/pptx/xlsx 技能文档。当前版本: {__version__}"
    ),
}

SERVER_CONFIG = {
    "host": os.getenv("MCP_HOST", "0.0.0.0"),
    "port": int(os.getenv("MCP_PORT", "3001")),
}

logger = get_logger("mcp.office_skills.server")

mcp = FastMCP(
    name=SERVER_INFO["name"],
    instructions=SERVER_INFO["instructions"],
    host=SERVER_CONFIG["host"],
    port=SERVER_CONFIG["port"],
    json_response=False,
    stateless_http=True,
)


def _json_content(data: Any) -> List[TextContent]:
    return [TextContent(type="text", text=json.dumps(data, ensure_ascii=False, indent=2))]


def _error_content(error: OfficeSkillError) -> List[TextContent]:
    logger.error(f"工具执行失败: {error.failure_type.value} - {error.message}")
    return _json_content(error.to_dict())


def _resolve_path(file_path: str) -> str:
    """URL解码并校验绝对路径"""
    decoded_path = urllib.parse.unquote(file_path)
    if decoded_path != file_path:
        logger.debug(f"URL解码路径: {file_path} -> {decoded_path}")

    if not os.path.isabs(decoded_path):
        raise OfficeSkillError(
            f"路径格式错误: 必须使用绝对路径(以/开头)，当前路径'{decoded_path}'为相对路径",
            FailureType.VALIDATION_ERROR
        )
    return decoded_path


@mcp.tool(
    description="使用LibreOffice重新计算Excel工作簿的全部公式并报告 #REF!/#DIV/0!/#VALUE!/#N/A/#NAME? 错误",
    annotations=ToolAnnotations(
        title="Excel公式重算",
        readOnlyHint=False,  # 会保存重新计算后的工作簿
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def recalc_workbook(
    file_path: Annotated[str, "Excel文件绝对路径(如/Users/user/model.xlsx)"],
    timeout: Annotated[int, "LibreOffice超时秒数"] = DEFAULT_RECALC_TIMEOUT,
) -> List[TextContent]:
    logger.info(f"收到公式重算请求: {file_path}")
    try:
        path = _resolve_path(file_path)
        result = await asyncio.to_thread(recalc, path, timeout)
    except OfficeSkillError as e:
        return _error_content(e)
    return _json_content(result.model_dump())


@mcp.tool(
    description="列出PPTX中每张幻灯片包含文本的形状及段落格式，键与文本替换JSON一致",
    annotations=ToolAnnotations(
        title="演示文稿文本盘点",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def inventory_presentation(
    file_path: Annotated[str, "PPTX文件绝对路径"],
) -> List[TextContent]:
    logger.info(f"收到演示文稿盘点请求: {file_path}")
    try:
        path = _resolve_path(file_path)
        inventory = await asyncio.to_thread(extract_inventory, path)
    except OfficeSkillError as e:
        return _error_content(e)
    return _json_content(inventory_to_dict(inventory))


@mcp.tool(
    description="使用pdfplumber提取PDF表格，可选合并单元格填充",
    annotations=ToolAnnotations(
        title="PDF表格提取",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def extract_pdf_tables(
    file_path: Annotated[str, "PDF文件绝对路径"],
    strategy: Annotated[str, "检测策略: lines（有框线）或 text（无框线）"] = "lines",
    pages: Annotated[Optional[List[int]], "页码列表（从1开始），为空时处理全部页面"] = None,
    fill_merged: Annotated[bool, "是否向右填充横向合并单元格"] = False,
) -> List[TextContent]:
    logger.info(f"收到PDF表格提取请求: {file_path}, 策略: {strategy}")
    try:
        path = _resolve_path(file_path)
        tables = await asyncio.to_thread(extract_tables, path, strategy, pages, fill_merged)
    except OfficeSkillError as e:
        return _error_content(e)
    return _json_content([table.model_dump() for table in tables])


@mcp.tool(
    description="对扫描版PDF逐页OCR（pdf2image + tesseract），结果按页缓存",
    annotations=ToolAnnotations(
        title="PDF OCR",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def ocr_pdf_document(
    file_path: Annotated[str, "PDF文件绝对路径"],
    lang: Annotated[str, "tesseract语言，如 eng 或 eng+chi_sim"] = OCR_LANGUAGE,
    dpi: Annotated[int, "栅格化分辨率"] = OCR_DPI,
    first_page: Annotated[Optional[int], "起始页（从1开始）"] = None,
    last_page: Annotated[Optional[int], "结束页（包含）"] = None,
) -> List[TextContent]:
    logger.info(f"收到PDF OCR请求: {file_path}, 语言: {lang}, DPI: {dpi}")
    try:
        path = _resolve_path(file_path)
        result = await asyncio.to_thread(
            ocr_pdf, path, lang=lang, dpi=dpi, first_page=first_page, last_page=last_page
        )
    except OfficeSkillError as e:
        return _error_content(e)
    return _json_content({"text": result.text, **result.model_dump()})


@mcp.tool(
    description="列出可用的Office文档技能（docx/pdf/pptx/xlsx）及其附加资源",
    annotations=ToolAnnotations(
        title="技能列表",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def list_office_skills() -> List[TextContent]:
    return _json_content([skill.model_dump() for skill in get_registry().list_skills()])


@mcp.tool(
    description="加载技能说明（SKILL.md）或指定的附加资源",
    annotations=ToolAnnotations(
        title="加载技能文档",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def load_office_skill(
    skill_id: Annotated[str, "技能ID: docx/pdf/pptx/xlsx"],
    resource: Annotated[Optional[str], "附加资源名，如 recalc；为空时加载 SKILL.md"] = None,
) -> List[TextContent]:
    registry = get_registry()
    try:
        if resource:
            content = registry.load_resource(skill_id, resource)
        else:
            content = registry.load_core(skill_id)
    except OfficeSkillError as e:
        return _error_content(e)
    return _json_content({"skill": skill_id, "resource": resource, "content": content})


@mcp.tool(
    description="检查 LibreOffice、pandoc、poppler、tesseract 等系统工具和Python依赖是否已安装",
    annotations=ToolAnnotations(
        title="环境检查",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def check_office_environment() -> List[TextContent]:
    return _json_content({
        "tools": [status.model_dump() for status in check_environment()],
        "missing_python_modules": missing_python_modules(),
    })


def parse_arguments(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(description="MCP Office文档技能服务器")
    transport = parser.add_mutually_exclusive_group()
    transport.add_argument("--stdio", action="store_true", help="使用标准输入输出传输（默认）")
    transport.add_argument("--http", action="store_true", help="使用streamable HTTP传输")
    parser.add_argument("--port", type=int, default=SERVER_CONFIG["port"], help="HTTP端口")
    return parser.parse_args(argv)


def main(argv=None):
    """运行MCP服务器"""
    args = parse_arguments(argv)

    if args.http:
        mcp.settings.port = args.port
        logger.info(
            f"启动MCP服务器 - {SERVER_INFO['name']} v{SERVER_INFO['version']} - "
            f"地址: {SERVER_CONFIG['host']}:{args.port}"
        )
        mcp.run(transport="streamable-http")
    else:
        # stdio 模式下标准输出用于协议通信，日志只写标准错误
        logger.info(f"启动MCP服务器(stdio) - {SERVER_INFO['name']} v{SERVER_INFO['version']}")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    sys.exit(main())
