#!/usr/bin/env python3
"""
检查系统工具和Python依赖是否已安装

用法:
    office-skills-doctor

输出与MCP工具 check_office_environment 相同的JSON；缺少必需工具或Python依赖时退出码为1
"""

import argparse
import sys

from ..environment import check_environment, missing_python_modules
from . import print_json


def main(argv=None) -> int:
    argparse.ArgumentParser(
        prog="office-skills-doctor",
        description="检查文档工作流所需的系统工具和Python依赖",
    ).parse_args(argv)

    statuses = check_environment()
    modules = missing_python_modules()
    print_json({
        "tools": [status.model_dump() for status in statuses],
        "missing_python_modules": modules,
    })

    missing_required = any(status.required and not status.available for status in statuses)
    return 1 if missing_required or modules else 0


if __name__ == "__main__":
    sys.exit(main())
