#!/usr/bin/env python3
"""
重新计算Excel公式并报告错误

用法:
    office-recalc <excel_file> [timeout_seconds]
"""

import argparse
import sys

from ..config import DEFAULT_RECALC_TIMEOUT
from ..models import OfficeSkillError
from ..spreadsheet.recalculate import recalc
from . import print_json, fail


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="office-recalc",
        description="使用LibreOffice重新计算Excel公式并扫描错误",
    )
    parser.add_argument("excel_file", help="Excel文件路径")
    parser.add_argument(
        "timeout", nargs="?", type=int, default=DEFAULT_RECALC_TIMEOUT,
        help=f"超时秒数（默认 {DEFAULT_RECALC_TIMEOUT}）"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    try:
        result = recalc(args.excel_file, args.timeout)
    except OfficeSkillError as e:
        return fail(e)

    print_json(result.model_dump())
    return 0


if __name__ == "__main__":
    sys.exit(main())
