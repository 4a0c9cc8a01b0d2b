"""
测试外部转换工具（LibreOffice / pandoc），外部进程全部模拟
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from office_skills.converters import (
    run_soffice, convert_document, convert_legacy_format,
    convert_to_markdown, convert_from_markdown
)
from office_skills.models import OfficeSkillError, ToolNotFoundError, FailureType


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunSoffice:
    """测试LibreOffice命令执行"""

    def test_falls_back_to_next_command(self):
        """第一个候选命令不存在时尝试下一个"""
        with patch("office_skills.converters.libreoffice.subprocess.run",
                   side_effect=[FileNotFoundError(), _completed()]) as mock_run:
            result = run_soffice(["--version"], timeout=5)

        assert result.returncode == 0
        assert mock_run.call_count == 2
        assert mock_run.call_args_list[0][0][0] == ["soffice", "--version"]
        assert mock_run.call_args_list[1][0][0] == ["libreoffice", "--version"]
        assert mock_run.call_args_list[1][1]["timeout"] == 5

    def test_no_command_available(self):
        with patch("office_skills.converters.libreoffice.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ToolNotFoundError):
                run_soffice(["--version"])

    def test_timeout(self):
        with patch("office_skills.converters.libreoffice.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(cmd="soffice", timeout=1)):
            with pytest.raises(OfficeSkillError) as exc_info:
                run_soffice(["--headless"], timeout=1)

        assert exc_info.value.failure_type == FailureType.TIMEOUT


class TestConvertDocument:
    """测试格式转换"""

    @staticmethod
    def _fake_convert(args, timeout=None):
        outdir = Path(args[args.index("--outdir") + 1])
        target_format = args[args.index("--convert-to") + 1]
        source = Path(args[-1])
        (outdir / f"{source.stem}.{target_format}").write_bytes(b"converted")
        return _completed()

    def test_convert_document(self, tmp_path):
        source = tmp_path / "deck.pptx"
        source.write_bytes(b"pptx")
        out_dir = tmp_path / "out"

        with patch("office_skills.converters.libreoffice.run_soffice",
                   side_effect=self._fake_convert) as mock_run:
            result = convert_document(source, "pdf", out_dir)

        assert result == out_dir / "deck.pdf"
        assert result.exists()
        args = mock_run.call_args[0][0]
        assert args[0].startswith("-env:UserInstallation=file://")
        assert "--headless" in args

    def test_missing_input(self, tmp_path):
        with pytest.raises(OfficeSkillError) as exc_info:
            convert_document(tmp_path / "missing.docx", "pdf")

        assert exc_info.value.failure_type == FailureType.FILE_NOT_FOUND

    def test_nonzero_exit(self, tmp_path):
        source = tmp_path / "a.docx"
        source.write_bytes(b"docx")

        with patch("office_skills.converters.libreoffice.run_soffice",
                   return_value=_completed(returncode=1, stderr="boom")):
            with pytest.raises(OfficeSkillError) as exc_info:
                convert_document(source, "pdf")

        assert exc_info.value.failure_type == FailureType.CONVERSION_ERROR
        assert "boom" in exc_info.value.message

    def test_output_missing(self, tmp_path):
        """返回码为0但没有生成文件"""
        source = tmp_path / "a.docx"
        source.write_bytes(b"docx")

        with patch("office_skills.converters.libreoffice.run_soffice", return_value=_completed()):
            with pytest.raises(OfficeSkillError) as exc_info:
                convert_document(source, "pdf")

        assert exc_info.value.failure_type == FailureType.CONVERSION_ERROR

    def test_legacy_format_mapping(self, tmp_path):
        source = tmp_path / "old.xls"
        source.write_bytes(b"xls")

        with patch("office_skills.converters.libreoffice.convert_document",
                   return_value=tmp_path / "old.xlsx") as mock_convert:
            convert_legacy_format(source, tmp_path)

        mock_convert.assert_called_once_with(source, ".xlsx", tmp_path)

    def test_legacy_format_unsupported(self, tmp_path):
        with pytest.raises(OfficeSkillError) as exc_info:
            convert_legacy_format(tmp_path / "file.rtf")

        assert exc_info.value.failure_type == FailureType.INVALID_FILE_FORMAT


class TestPandoc:
    """测试pandoc转换"""

    def test_convert_to_markdown(self, tmp_path):
        source = tmp_path / "memo.docx"
        source.write_bytes(b"docx")

        with patch("office_skills.converters.pandoc.subprocess.run",
                   return_value=_completed(stdout="# Title\n\nBody\n\n")) as mock_run:
            markdown = convert_to_markdown(source, media_dir=tmp_path / "media")

        assert markdown == "# Title\n\nBody"
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "pandoc"
        assert cmd[cmd.index("--from") + 1] == "docx"
        assert "--extract-media" in cmd

    def test_pandoc_missing(self, tmp_path):
        source = tmp_path / "memo.docx"
        source.write_bytes(b"docx")

        with patch("office_skills.converters.pandoc.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ToolNotFoundError):
                convert_to_markdown(source)

    def test_pandoc_failure(self, tmp_path):
        source = tmp_path / "memo.docx"
        source.write_bytes(b"docx")

        with patch("office_skills.converters.pandoc.subprocess.run",
                   return_value=_completed(returncode=64, stderr="Unknown input format")):
            with pytest.raises(OfficeSkillError) as exc_info:
                convert_to_markdown(source)

        assert exc_info.value.failure_type == FailureType.CONVERSION_ERROR

    def test_convert_from_markdown(self, tmp_path):
        source = tmp_path / "draft.md"
        source.write_text("# Draft", encoding="utf-8")
        reference = tmp_path / "brand.docx"
        output = tmp_path / "out" / "draft.docx"

        with patch("office_skills.converters.pandoc.subprocess.run", return_value=_completed()) as mock_run:
            result = convert_from_markdown(source, output, to_format="docx", reference_doc=reference)

        assert result == output
        assert output.parent.is_dir()
        cmd = mock_run.call_args[0][0]
        assert cmd[cmd.index("-o") + 1] == str(output.resolve())
        assert cmd[cmd.index("--reference-doc") + 1] == str(reference.resolve())
