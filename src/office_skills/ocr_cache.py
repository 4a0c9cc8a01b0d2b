"""
OCR结果缓存管理器
按 PDF 内容哈希、语言、分辨率和页码缓存单页识别结果
"""

import hashlib
import os
import time
from pathlib import Path
from typing import Optional, Union

from diskcache import Cache

from .config import CACHE_ROOT_DIR, OCR_CACHE_SIZE_MB, CACHE_EXPIRE_DAYS
from .utils import get_logger


class OcrCache:
    """OCR结果缓存管理器"""

    def __init__(self, cache_dir: Union[str, Path, None] = None):
        """
        初始化OCR结果缓存

        Args:
            cache_dir: 缓存目录，默认 <CACHE_ROOT_DIR>/ocr
        """
        self.logger = get_logger("office_skills.ocr_cache")

        cache_dir = str(cache_dir or os.path.join(CACHE_ROOT_DIR, "ocr"))
        self.cache = Cache(cache_dir, size_limit=OCR_CACHE_SIZE_MB * 1024 * 1024)
        self.expire_seconds = CACHE_EXPIRE_DAYS * 24 * 3600

        self.logger.debug(f"OCR缓存初始化完成 - 目录: {cache_dir}, 大小: {OCR_CACHE_SIZE_MB}MB, 有效期: {CACHE_EXPIRE_DAYS}天")

    @staticmethod
    def file_digest(file_path: Union[str, Path]) -> str:
        """计算文件内容哈希"""
        digest = hashlib.sha256()
        with open(file_path, 'rb') as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b''):
                digest.update(chunk)
        return digest.hexdigest()[:16]

    @staticmethod
    def get_cache_key(file_hash: str, language: str, dpi: int, page_number: int) -> str:
        """生成单页缓存键"""
        return f"ocr:{file_hash}:{language}:{dpi}:p{page_number}"

    def get(self, cache_key: str) -> Optional[str]:
        """获取缓存的页面文本，未命中返回None"""
        try:
            cached = self.cache.get(cache_key)
        except Exception as e:
            self.logger.warning(f"获取OCR缓存失败: {cache_key}, 错误: {e}")
            return None

        if cached is None:
            self.logger.debug(f"OCR缓存未命中: {cache_key}")
            return None
        self.logger.debug(f"OCR缓存命中: {cache_key}")
        return cached["text"]

    def set(self, cache_key: str, text: str) -> bool:
        """缓存页面文本"""
        try:
            self.cache.set(
                cache_key,
                {"text": text, "timestamp": int(time.time())},
                expire=self.expire_seconds
            )
            return True
        except Exception as e:
            self.logger.warning(f"缓存OCR结果失败: {cache_key}, 错误: {e}")
            return False

    def clear(self):
        """清理所有OCR缓存"""
        self.cache.clear()
        self.logger.info("OCR缓存已清理")


# 全局OCR缓存实例
_global_ocr_cache = None


def get_ocr_cache() -> OcrCache:
    """获取全局OCR缓存实例"""
    global _global_ocr_cache
    if _global_ocr_cache is None:
        _global_ocr_cache = OcrCache()
    return _global_ocr_cache
