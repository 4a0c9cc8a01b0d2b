"""
运行环境检测
检查文档工作流依赖的系统工具和Python库是否可用
"""

import importlib
import shutil
from typing import List, Optional

from .config import SYSTEM_TOOLS, PYTHON_MODULES
from .models import ToolStatus, ToolNotFoundError
from .utils import get_logger

logger = get_logger("office_skills.environment")


def find_tool(name: str) -> Optional[str]:
    """
    查找系统工具的可执行文件

    Args:
        name: SYSTEM_TOOLS 中的工具名

    Returns:
        可执行文件路径，未安装返回None
    """
    tool = SYSTEM_TOOLS.get(name)
    if tool is None:
        raise KeyError(f"未知工具: {name}")

    for command in tool['commands']:
        path = shutil.which(command)
        if path:
            return path
    return None


def require_tool(name: str) -> str:
    """查找系统工具，未安装时抛出带安装提示的 ToolNotFoundError"""
    path = find_tool(name)
    if path is None:
        package = SYSTEM_TOOLS[name]['package']
        raise ToolNotFoundError(f"未找到 {name}，请先安装: sudo apt-get install {package}")
    return path


def check_environment() -> List[ToolStatus]:
    """检查所有系统工具"""
    statuses = []
    for name, tool in SYSTEM_TOOLS.items():
        path = find_tool(name)
        statuses.append(ToolStatus(
            name=name,
            available=path is not None,
            path=path,
            required=tool['required'],
            package=tool['package'],
            purpose=tool['purpose'],
        ))
        if path is None and tool['required']:
            logger.warning(f"缺少系统工具 {name}（apt 包: {tool['package']}）")
    return statuses


def missing_python_modules() -> List[str]:
    """返回无法导入的Python依赖（发行包名）"""
    missing = []
    for import_name, dist_name in PYTHON_MODULES.items():
        try:
            importlib.import_module(import_name)
        except ImportError:
            missing.append(dist_name)
    return missing
