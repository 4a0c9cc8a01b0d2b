"""
幻灯片缩略图
LibreOffice 渲染为PDF，pdf2image 栅格化，Pillow 拼接带编号的网格图
"""

import math
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pdf2image import convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError
from PIL import Image, ImageDraw

from ..config import THUMBNAIL_COLUMNS, THUMBNAIL_WIDTH, THUMBNAIL_DPI
from ..converters.libreoffice import convert_document
from ..models import OfficeSkillError, ToolNotFoundError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.thumbnail")

PADDING = 10
LABEL_HEIGHT = 20
BACKGROUND = "white"


def build_grid(images: Sequence[Image.Image], cols: int = THUMBNAIL_COLUMNS,
               thumb_width: int = THUMBNAIL_WIDTH,
               labels: Optional[Sequence[str]] = None) -> Image.Image:
    """
    将幻灯片图像拼接成网格

    Args:
        images: 幻灯片图像
        cols: 每行列数（不超过图像数量）
        thumb_width: 每个缩略图宽度（像素）
        labels: 每个缩略图下方的标签，默认使用从0开始的序号

    Returns:
        网格图像
    """
    if not images:
        raise OfficeSkillError("没有可拼接的幻灯片图像", FailureType.VALIDATION_ERROR)

    cols = max(1, min(cols, len(images)))
    labels = list(labels) if labels is not None else [str(idx) for idx in range(len(images))]

    thumbs = []
    for image in images:
        height = max(1, round(image.height * thumb_width / image.width))
        thumbs.append(image.convert("RGB").resize((thumb_width, height)))

    cell_height = max(thumb.height for thumb in thumbs) + LABEL_HEIGHT
    rows = math.ceil(len(thumbs) / cols)
    grid = Image.new(
        "RGB",
        (cols * thumb_width + (cols + 1) * PADDING, rows * cell_height + (rows + 1) * PADDING),
        BACKGROUND
    )
    draw = ImageDraw.Draw(grid)

    for idx, thumb in enumerate(thumbs):
        row, col = divmod(idx, cols)
        x = PADDING + col * (thumb_width + PADDING)
        y = PADDING + row * (cell_height + PADDING)
        grid.paste(thumb, (x, y))
        draw.text((x, y + thumb.height + 4), labels[idx], fill="black")

    return grid


def grid_file_names(slide_count: int, cols: int = THUMBNAIL_COLUMNS) -> List[str]:
    """网格文件名：一张网格为 thumbnails.jpg，多张为 thumbnails-<n>.jpg"""
    per_grid = cols * (cols + 1)
    grid_count = max(1, math.ceil(slide_count / per_grid))
    if grid_count == 1:
        return ["thumbnails.jpg"]
    return [f"thumbnails-{idx}.jpg" for idx in range(1, grid_count + 1)]


def rasterize_slides(pptx_path: Union[str, Path], dpi: int = THUMBNAIL_DPI) -> List[Image.Image]:
    """渲染演示文稿每一页为图像"""
    with tempfile.TemporaryDirectory(prefix="pptx_render_") as temp_dir:
        pdf_path = convert_document(pptx_path, "pdf", temp_dir)
        try:
            return convert_from_path(str(pdf_path), dpi=dpi)
        except PDFInfoNotInstalledError:
            raise ToolNotFoundError("未找到poppler，请安装: sudo apt-get install poppler-utils")


def render_thumbnails(pptx_path: Union[str, Path], thumb_dir: Union[str, Path],
                      cols: int = THUMBNAIL_COLUMNS, thumb_width: int = THUMBNAIL_WIDTH) -> List[Path]:
    """
    生成演示文稿缩略图网格

    每张网格最多 cols * (cols + 1) 张幻灯片

    Args:
        pptx_path: 演示文稿路径
        thumb_dir: 输出目录
        cols: 每行列数
        thumb_width: 缩略图宽度

    Returns:
        生成的网格图像路径
    """
    pptx_path = Path(pptx_path)
    if not pptx_path.exists():
        raise OfficeSkillError(f"文件不存在: {pptx_path}", FailureType.FILE_NOT_FOUND)

    slides = rasterize_slides(pptx_path)
    if not slides:
        raise OfficeSkillError("演示文稿没有可渲染的幻灯片", FailureType.CONVERSION_ERROR)

    thumb_dir = Path(thumb_dir)
    thumb_dir.mkdir(parents=True, exist_ok=True)

    per_grid = cols * (cols + 1)
    outputs = []
    for grid_idx, name in enumerate(grid_file_names(len(slides), cols)):
        start = grid_idx * per_grid
        chunk = slides[start:start + per_grid]
        labels = [str(idx) for idx in range(start, start + len(chunk))]
        path = thumb_dir / name
        build_grid(chunk, cols, thumb_width, labels).save(path, quality=90)
        outputs.append(path)

    logger.info(f"缩略图生成完成: {len(slides)} 张幻灯片 -> {len(outputs)} 张网格图")
    return outputs
