"""
测试工具函数
"""

import logging

from office_skills.utils import get_logger, normalize_content


class TestGetLogger:
    """测试日志记录器功能"""

    def test_get_logger_default(self):
        """测试获取默认日志记录器"""
        logger = get_logger("test.logger")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.logger"
        assert logger.level == logging.INFO

    def test_get_logger_with_level(self):
        """测试指定级别的日志记录器"""
        logger = get_logger("test.debug", "DEBUG")

        assert logger.level == logging.DEBUG

    def test_get_logger_singleton(self):
        """测试重复获取不会重复添加处理器"""
        logger1 = get_logger("test.singleton")
        handler_count = len(logger1.handlers)
        logger2 = get_logger("test.singleton")

        assert logger1 is logger2
        assert len(logger2.handlers) == handler_count

    def test_console_handler_uses_stderr(self):
        """控制台日志写到stderr，stdout留给命令行JSON输出"""
        import sys
        logger = get_logger("test.stderr")
        stream_handlers = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]

        assert stream_handlers
        assert stream_handlers[0].stream is sys.stderr


class TestNormalizeContent:
    """测试文本规范化"""

    def test_empty(self):
        assert normalize_content("") == ""
        assert normalize_content(None) == ""

    def test_line_endings_and_form_feed(self):
        """测试换行符和换页符"""
        assert normalize_content("a\r\nb\rc\fd") == "a\nb\nc\nd"

    def test_collapse_blank_lines(self):
        """测试合并多余空行"""
        assert normalize_content("a\n\n\n\n\nb") == "a\n\nb"

    def test_unicode_spaces(self):
        """测试Unicode空白字符"""
        assert normalize_content("a\u00a0b\u3000c") == "a b c"

    def test_strip_trailing_spaces(self):
        """测试去除行尾空白"""
        assert normalize_content("  line one   \nline two\t\n\n") == "line one\nline two"
