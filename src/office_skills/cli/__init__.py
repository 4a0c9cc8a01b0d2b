"""
命令行脚本
每个脚本只接受位置参数，结果以JSON或简短文本输出到标准输出，日志输出到标准错误
"""

import json
import sys

from ..models import OfficeSkillError


def print_json(data) -> None:
    """输出JSON到标准输出"""
    print(json.dumps(data, ensure_ascii=False, indent=2))


def fail(error: OfficeSkillError) -> int:
    """输出错误结构并返回退出码1"""
    print_json(error.to_dict())
    sys.stdout.flush()
    return 1
