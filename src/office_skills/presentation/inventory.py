"""
演示文稿文本盘点
列出每张幻灯片中包含文本的形状及其段落格式，作为文本替换的依据
"""

import json
from collections import OrderedDict
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Tuple, Union

from pptx import Presentation
from pptx.enum.dml import MSO_COLOR_TYPE
from pptx.enum.shapes import PP_PLACEHOLDER
from pptx.oxml.ns import qn
from pptx.shapes.group import GroupShape
from pptx.util import Emu

from ..models import ShapeInfo, ParagraphSpec, OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.inventory")

# 页码、日期、页脚占位符不参与盘点
EXCLUDED_PLACEHOLDERS = {PP_PLACEHOLDER.SLIDE_NUMBER, PP_PLACEHOLDER.DATE, PP_PLACEHOLDER.FOOTER}

# 从母版继承项目符号的占位符
BULLET_PLACEHOLDERS = {PP_PLACEHOLDER.BODY, PP_PLACEHOLDER.OBJECT}

Inventory = Dict[str, Dict[str, ShapeInfo]]


def open_presentation(pptx_path: Union[str, Path]):
    """打开演示文稿"""
    pptx_path = Path(pptx_path)
    if not pptx_path.exists():
        raise OfficeSkillError(f"文件不存在: {pptx_path}", FailureType.FILE_NOT_FOUND)
    try:
        return Presentation(str(pptx_path))
    except Exception as e:
        raise OfficeSkillError(f"无法打开演示文稿: {pptx_path}, 错误: {e}", FailureType.INVALID_FILE_FORMAT)


def _group_transform(group, outer: Optional[Callable] = None) -> Optional[Callable]:
    """
    组内坐标到幻灯片坐标的映射

    子形状的 off/ext 位于组的 chOff/chExt 坐标系中，需要按组的 off/ext 平移和缩放
    """
    xfrm = group._element.grpSpPr.find(qn('a:xfrm'))
    if xfrm is None:
        return outer
    off, ext, ch_off, ch_ext = (xfrm.find(qn(f'a:{tag}')) for tag in ('off', 'ext', 'chOff', 'chExt'))
    if any(element is None for element in (off, ext, ch_off, ch_ext)):
        return outer

    ch_cx, ch_cy = int(ch_ext.get('cx')), int(ch_ext.get('cy'))
    scale_x = int(ext.get('cx')) / ch_cx if ch_cx else 1.0
    scale_y = int(ext.get('cy')) / ch_cy if ch_cy else 1.0

    def transform(left, top):
        left = int(off.get('x')) + (left - int(ch_off.get('x'))) * scale_x
        top = int(off.get('y')) + (top - int(ch_off.get('y'))) * scale_y
        return outer(left, top) if outer else (left, top)

    return transform


def _iter_shapes(shapes, transform: Optional[Callable] = None) -> Iterator[Tuple[object, Tuple[float, float]]]:
    """展开组合形状，返回 (形状, 幻灯片坐标中的 (top, left))"""
    for shape in shapes:
        if isinstance(shape, GroupShape):
            yield from _iter_shapes(shape.shapes, _group_transform(shape, transform))
            continue
        left, top = shape.left or 0, shape.top or 0
        if transform:
            left, top = transform(left, top)
        yield shape, (top, left)


def _placeholder_type(shape):
    if not shape.is_placeholder:
        return None
    return shape.placeholder_format.type


def _inches(value: Optional[int]) -> float:
    return round(Emu(value).inches, 2) if value is not None else 0.0


def text_shapes(presentation) -> "OrderedDict[str, OrderedDict[str, object]]":
    """
    按盘点规则收集文本形状

    形状按幻灯片坐标中的 (top, left) 排序，组内形状先换算到幻灯片坐标。
    键为 slide-<n> / shape-<m>（从0开始），inventory 和 replace 共用这一编号。
    """
    slides = OrderedDict()
    for slide_idx, slide in enumerate(presentation.slides):
        candidates = []
        for shape, position in _iter_shapes(slide.shapes):
            if not shape.has_text_frame or not shape.text_frame.text.strip():
                continue
            if _placeholder_type(shape) in EXCLUDED_PLACEHOLDERS:
                continue
            candidates.append((position, shape))

        if not candidates:
            continue

        candidates.sort(key=lambda item: item[0])
        slides[f"slide-{slide_idx}"] = OrderedDict(
            (f"shape-{shape_idx}", shape) for shape_idx, (_, shape) in enumerate(candidates)
        )
    return slides


def _has_bullet(paragraph, placeholder_type) -> bool:
    pPr = paragraph._p.pPr
    if pPr is not None:
        if pPr.find(qn('a:buNone')) is not None:
            return False
        if pPr.find(qn('a:buChar')) is not None or pPr.find(qn('a:buAutoNum')) is not None:
            return True
    return placeholder_type in BULLET_PLACEHOLDERS


def _paragraph_spec(paragraph, placeholder_type) -> ParagraphSpec:
    spec = ParagraphSpec(
        text=paragraph.text,
        bullet=_has_bullet(paragraph, placeholder_type),
        level=paragraph.level,
        alignment=paragraph.alignment.name if paragraph.alignment is not None else None,
    )

    # 以第一个文本段的字体代表整段
    if not paragraph.runs:
        return spec
    font = paragraph.runs[0].font
    spec.bold = font.bold
    spec.italic = font.italic
    spec.underline = bool(font.underline) if font.underline is not None else None
    spec.font_size = font.size.pt if font.size is not None else None
    spec.font_name = font.name
    if font.color.type == MSO_COLOR_TYPE.RGB:
        spec.color = str(font.color.rgb)
    return spec


def shape_info(shape) -> ShapeInfo:
    """构建形状的盘点信息"""
    placeholder_type = _placeholder_type(shape)
    paragraphs = [
        _paragraph_spec(paragraph, placeholder_type)
        for paragraph in shape.text_frame.paragraphs
        if paragraph.text.strip()
    ]
    return ShapeInfo(
        shape_id=shape.shape_id,
        name=shape.name,
        left=_inches(shape.left),
        top=_inches(shape.top),
        width=_inches(shape.width),
        height=_inches(shape.height),
        placeholder_type=placeholder_type.name if placeholder_type is not None else None,
        paragraphs=paragraphs,
    )


def extract_inventory(pptx_path: Union[str, Path]) -> Inventory:
    """
    盘点演示文稿中的文本形状

    Args:
        pptx_path: 演示文稿路径

    Returns:
        {slide-n: {shape-m: ShapeInfo}}
    """
    presentation = open_presentation(pptx_path)
    inventory = OrderedDict()
    for slide_key, shapes in text_shapes(presentation).items():
        inventory[slide_key] = OrderedDict(
            (shape_key, shape_info(shape)) for shape_key, shape in shapes.items()
        )

    shape_total = sum(len(shapes) for shapes in inventory.values())
    logger.info(f"盘点完成: {Path(pptx_path).name}, 幻灯片 {len(inventory)} 张, 文本形状 {shape_total} 个")
    return inventory


def inventory_to_dict(inventory: Inventory) -> dict:
    """转换为JSON可序列化结构，省略未设置的属性"""
    return {
        slide_key: {
            shape_key: info.model_dump(exclude_none=True)
            for shape_key, info in shapes.items()
        }
        for slide_key, shapes in inventory.items()
    }


def save_inventory(pptx_path: Union[str, Path], json_out_path: Union[str, Path]) -> Path:
    """盘点并写入JSON文件"""
    data = inventory_to_dict(extract_inventory(pptx_path))
    json_out_path = Path(json_out_path)
    json_out_path.parent.mkdir(parents=True, exist_ok=True)
    json_out_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')
    logger.info(f"盘点结果已保存: {json_out_path}")
    return json_out_path
