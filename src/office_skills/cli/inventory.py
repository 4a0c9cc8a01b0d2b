#!/usr/bin/env python3
"""
盘点演示文稿中的文本形状

用法:
    office-inventory <input.pptx> <output.json>
"""

import argparse
import sys

from ..models import OfficeSkillError
from ..presentation.inventory import save_inventory
from . import fail


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="office-inventory",
        description="提取演示文稿的文本形状清单（JSON）",
    )
    parser.add_argument("input", help="输入PPTX文件")
    parser.add_argument("output", help="输出JSON文件")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    try:
        output = save_inventory(args.input, args.output)
    except OfficeSkillError as e:
        return fail(e)

    print(f"盘点结果已保存: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
