"""
Office Skills 工具函数
"""

import os
import re
import sys
import logging
from pathlib import Path
from datetime import datetime


def get_logger(name: str, level: str = None) -> logging.Logger:
    """
    获取日志记录器，自动配置控制台和文件输出

    控制台输出写到 stderr，命令行脚本的 stdout 只用于 JSON 结果

    Args:
        name: 日志记录器名称
        level: 日志级别

    Returns:
        配置好的日志记录器
    """
    logger = logging.getLogger(name)

    # 避免重复添加处理器
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logger.level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 日志文件名按日期和模块名
    logs_dir = Path(os.getenv("LOG_DIR", "logs"))
    current_date = datetime.now().strftime('%Y-%m-%d')
    module_name = name.split('.')[-1]
    log_filename = logs_dir / f"{current_date}_{module_name}.log"

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setLevel(logger.level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        # 文件处理器创建失败时只保留控制台输出
        logger.warning(f"无法创建日志文件 {log_filename}: {e}")

    return logger


def normalize_content(content: str) -> str:
    """
    规范化文本内容（OCR 和文本提取结果）

    Args:
        content: 原始文本内容

    Returns:
        规范化后的文本内容
    """
    if not content:
        return ""

    # 各种 Unicode 空白字符统一为普通空格
    content = re.sub(r"[\u00a0\u2000-\u200a\u3000]", " ", content)

    # 规范化换行符
    content = content.replace('\r\n', '\n')
    content = content.replace('\r', '\n')

    # 表单换页符（pdftotext/tesseract 常见）
    content = content.replace('\f', '\n')

    # 删除多余的空白行
    content = re.sub(r'\n{3,}', '\n\n', content)

    lines = [line.rstrip() for line in content.split('\n')]
    return '\n'.join(lines).strip()
