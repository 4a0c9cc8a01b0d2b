#!/usr/bin/env python3
"""
按盘点编号替换演示文稿文本

用法:
    office-replace <input.pptx> <replacements.json> <output.pptx>
"""

import argparse
import sys

from ..models import OfficeSkillError
from ..presentation.replace import apply_replacements
from . import fail


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="office-replace",
        description="使用替换JSON重写演示文稿文本（盘点到的形状全部清空）",
    )
    parser.add_argument("input", help="输入PPTX文件")
    parser.add_argument("replacements", help="替换JSON文件")
    parser.add_argument("output", help="输出PPTX文件")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    try:
        output = apply_replacements(args.input, args.replacements, args.output)
    except OfficeSkillError as e:
        return fail(e)

    print(f"已保存: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
