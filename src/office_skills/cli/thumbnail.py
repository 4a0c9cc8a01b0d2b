#!/usr/bin/env python3
"""
生成演示文稿缩略图网格

用法:
    office-thumbnail <input.pptx> <thumb_dir>
"""

import argparse
import sys

from ..models import OfficeSkillError
from ..presentation.thumbnail import render_thumbnails
from . import fail


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="office-thumbnail",
        description="渲染幻灯片并拼接为带编号的缩略图网格",
    )
    parser.add_argument("input", help="输入PPTX文件")
    parser.add_argument("thumb_dir", help="缩略图输出目录")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    try:
        outputs = render_thumbnails(args.input, args.thumb_dir)
    except OfficeSkillError as e:
        return fail(e)

    for path in outputs:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
