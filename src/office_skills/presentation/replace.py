"""
演示文稿文本替换
按盘点编号替换形状文本：盘点到的形状全部清空，提供了段落的形状写入新段落
"""

import json
from pathlib import Path
from typing import Dict, List, Union

from pptx.dml.color import RGBColor
from pptx.enum.text import PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Pt
from pydantic import ValidationError

from ..models import ShapeReplacement, ParagraphSpec, OfficeSkillError, FailureType
from ..utils import get_logger
from .inventory import open_presentation, text_shapes

logger = get_logger("office_skills.replace")

BULLET_CHAR = "•"
BULLET_INDENT_EMU = 285750
_BULLET_TAGS = ('a:buNone', 'a:buAutoNum', 'a:buChar', 'a:buBlip')
_BULLET_SUCCESSORS = ('a:tabLst', 'a:defRPr', 'a:extLst')

Replacements = Dict[str, Dict[str, ShapeReplacement]]


def load_replacements(source: Union[str, Path, dict]) -> Replacements:
    """
    读取并校验替换内容

    Args:
        source: JSON文件路径或已解析的字典

    Returns:
        {slide-n: {shape-m: ShapeReplacement}}
    """
    if isinstance(source, dict):
        raw = source
    else:
        path = Path(source)
        if not path.exists():
            raise OfficeSkillError(f"文件不存在: {path}", FailureType.FILE_NOT_FOUND)
        try:
            raw = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise OfficeSkillError(f"替换文件不是有效的JSON: {e}", FailureType.PARSE_ERROR)

    if not isinstance(raw, dict):
        raise OfficeSkillError("替换内容必须是以 slide-n 为键的对象", FailureType.VALIDATION_ERROR)

    try:
        return {
            slide_key: {
                shape_key: ShapeReplacement.model_validate(shape_data)
                for shape_key, shape_data in shapes.items()
            }
            for slide_key, shapes in raw.items()
        }
    except (ValidationError, AttributeError) as e:
        raise OfficeSkillError(f"替换内容格式错误: {e}", FailureType.VALIDATION_ERROR)


def _set_bullet(paragraph, bullet: bool, level: int) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    for tag in _BULLET_TAGS:
        for element in pPr.findall(qn(tag)):
            pPr.remove(element)

    if bullet:
        element = OxmlElement('a:buChar')
        element.set('char', BULLET_CHAR)
        pPr.set('marL', str(BULLET_INDENT_EMU * (level + 1)))
        pPr.set('indent', str(-BULLET_INDENT_EMU))
    else:
        element = OxmlElement('a:buNone')

    # 保持 a:pPr 子元素的架构顺序
    successor = next((child for child in pPr if child.tag in {qn(t) for t in _BULLET_SUCCESSORS}), None)
    if successor is not None:
        successor.addprevious(element)
    else:
        pPr.append(element)


def _write_paragraph(paragraph, spec: ParagraphSpec) -> None:
    level = spec.level or 0
    if spec.level is not None:
        paragraph.level = spec.level
    if spec.bullet is not None:
        _set_bullet(paragraph, spec.bullet, level)
    if spec.alignment:
        try:
            paragraph.alignment = PP_ALIGN[spec.alignment]
        except KeyError:
            raise OfficeSkillError(f"未知的对齐方式: {spec.alignment}", FailureType.VALIDATION_ERROR)

    run = paragraph.add_run()
    run.text = spec.text
    font = run.font
    if spec.bold is not None:
        font.bold = spec.bold
    if spec.italic is not None:
        font.italic = spec.italic
    if spec.underline is not None:
        font.underline = spec.underline
    if spec.font_size is not None:
        font.size = Pt(spec.font_size)
    if spec.font_name:
        font.name = spec.font_name
    if spec.color:
        font.color.rgb = RGBColor.from_string(spec.color)


def fill_text_frame(text_frame, paragraphs: List[ParagraphSpec]) -> None:
    """清空文本框并写入段落"""
    text_frame.clear()
    for idx, spec in enumerate(paragraphs):
        paragraph = text_frame.paragraphs[0] if idx == 0 else text_frame.add_paragraph()
        _write_paragraph(paragraph, spec)


def _missing_keys(replacements: Replacements, shapes) -> List[str]:
    missing = []
    for slide_key, shape_replacements in replacements.items():
        if slide_key not in shapes:
            missing.append(slide_key)
            continue
        missing.extend(
            f"{slide_key}/{shape_key}"
            for shape_key in shape_replacements
            if shape_key not in shapes[slide_key]
        )
    return missing


def apply_replacements(pptx_path: Union[str, Path], replacements: Union[str, Path, dict],
                       output_path: Union[str, Path]) -> Path:
    """
    替换演示文稿文本

    Args:
        pptx_path: 源演示文稿
        replacements: 替换JSON路径或字典，键与 inventory 输出一致
        output_path: 输出演示文稿路径

    Returns:
        输出路径
    """
    replacement_map = load_replacements(replacements)
    presentation = open_presentation(pptx_path)
    shapes = text_shapes(presentation)

    missing = _missing_keys(replacement_map, shapes)
    if missing:
        raise OfficeSkillError(
            f"替换内容引用了盘点中不存在的形状: {', '.join(missing)}",
            FailureType.VALIDATION_ERROR
        )

    cleared = replaced = 0
    for slide_key, slide_shapes in shapes.items():
        for shape_key, shape in slide_shapes.items():
            replacement = replacement_map.get(slide_key, {}).get(shape_key)
            if replacement and replacement.paragraphs:
                fill_text_frame(shape.text_frame, replacement.paragraphs)
                replaced += 1
            else:
                shape.text_frame.clear()
                cleared += 1

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    presentation.save(str(output_path))

    logger.info(f"文本替换完成: 替换 {replaced} 个形状, 清空 {cleared} 个形状 -> {output_path}")
    return output_path
