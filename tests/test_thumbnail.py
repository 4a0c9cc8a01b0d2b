"""
测试幻灯片缩略图
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from office_skills.models import OfficeSkillError, FailureType
from office_skills.presentation import build_grid, render_thumbnails
from office_skills.presentation.thumbnail import grid_file_names, rasterize_slides


def _slides(count, size=(160, 90)):
    return [Image.new("RGB", size, "gray") for _ in range(count)]


class TestBuildGrid:
    """测试网格拼接"""

    def test_grid_size(self):
        """列数不超过图像数量"""
        grid = build_grid(_slides(3, (400, 300)), cols=5, thumb_width=100)

        # 3列，每张 100x75，下方标签 20，四周间距 10
        assert grid.size == (3 * 100 + 4 * 10, 75 + 20 + 2 * 10)

    def test_multiple_rows(self):
        grid = build_grid(_slides(7, (200, 100)), cols=3, thumb_width=100)

        assert grid.size == (3 * 100 + 4 * 10, 3 * (50 + 20) + 4 * 10)

    def test_empty(self):
        with pytest.raises(OfficeSkillError) as exc_info:
            build_grid([])

        assert exc_info.value.failure_type == FailureType.VALIDATION_ERROR


class TestGridFileNames:
    """测试网格文件命名"""

    @pytest.mark.parametrize("count,expected", [
        (1, ["thumbnails.jpg"]),
        (30, ["thumbnails.jpg"]),
        (31, ["thumbnails-1.jpg", "thumbnails-2.jpg"]),
        (61, ["thumbnails-1.jpg", "thumbnails-2.jpg", "thumbnails-3.jpg"]),
    ])
    def test_default_columns(self, count, expected):
        assert grid_file_names(count) == expected

    def test_custom_columns(self):
        # 3列每张网格最多12张
        assert len(grid_file_names(13, cols=3)) == 2


class TestRenderThumbnails:
    """测试缩略图生成流程"""

    def test_render_multiple_grids(self, sample_pptx, tmp_path):
        with patch("office_skills.presentation.thumbnail.rasterize_slides", return_value=_slides(31)):
            paths = render_thumbnails(sample_pptx, tmp_path / "thumbnails")

        assert [p.name for p in paths] == ["thumbnails-1.jpg", "thumbnails-2.jpg"]
        with Image.open(paths[0]) as first, Image.open(paths[1]) as second:
            assert first.size == (5 * 300 + 6 * 10, 6 * (169 + 20) + 7 * 10)
            assert second.size == (300 + 2 * 10, 169 + 20 + 2 * 10)

    def test_single_grid(self, sample_pptx, tmp_path):
        with patch("office_skills.presentation.thumbnail.rasterize_slides", return_value=_slides(3)):
            paths = render_thumbnails(sample_pptx, tmp_path)

        assert paths == [tmp_path / "thumbnails.jpg"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(OfficeSkillError) as exc_info:
            render_thumbnails(tmp_path / "none.pptx", tmp_path)

        assert exc_info.value.failure_type == FailureType.FILE_NOT_FOUND

    def test_rasterize_slides(self, sample_pptx):
        """先用LibreOffice转PDF再栅格化"""
        with patch("office_skills.presentation.thumbnail.convert_document",
                   return_value=Path("/tmp/deck.pdf")) as mock_convert, \
                patch("office_skills.presentation.thumbnail.convert_from_path",
                      return_value=_slides(2)) as mock_raster:
            images = rasterize_slides(sample_pptx, dpi=72)

        assert len(images) == 2
        assert mock_convert.call_args[0][:2] == (sample_pptx, "pdf")
        mock_raster.assert_called_once_with("/tmp/deck.pdf", dpi=72)
