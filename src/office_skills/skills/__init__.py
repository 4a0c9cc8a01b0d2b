"""
技能文档注册表
渐进式加载：元数据始终可见，SKILL.md 正文按需加载，附加资源按需加载

目录结构:
    skills/
    ├── xlsx/
    │   ├── SKILL.md        # YAML front matter + 核心说明
    │   └── recalc.md       # 附加资源
    └── ...
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml

from ..models import SkillMetadata, OfficeSkillError, FailureType
from ..utils import get_logger

logger = get_logger("office_skills.skills")

SKILLS_ROOT = Path(__file__).parent


def split_front_matter(content: str) -> Tuple[dict, str]:
    """拆分 YAML front matter 和正文"""
    if not content.startswith("---"):
        return {}, content.strip()

    lines = content.split("\n")
    for end_idx, line in enumerate(lines[1:], 1):
        if line.strip() == "---":
            metadata = yaml.safe_load("\n".join(lines[1:end_idx])) or {}
            return metadata, "\n".join(lines[end_idx + 1:]).strip()

    return {}, content.strip()


class SkillRegistry:
    """从目录加载技能文档"""

    def __init__(self, root: Union[str, Path, None] = None):
        self.root = Path(root) if root else SKILLS_ROOT
        self._skills: Dict[str, SkillMetadata] = {}
        self._load()

    def _load(self):
        if not self.root.exists():
            logger.warning(f"技能目录不存在: {self.root}")
            return

        for skill_dir in sorted(self.root.iterdir()):
            skill_md = skill_dir / "SKILL.md"
            if not skill_dir.is_dir() or not skill_md.exists():
                continue

            try:
                metadata, _ = split_front_matter(skill_md.read_text(encoding="utf-8"))
            except yaml.YAMLError as e:
                logger.error(f"解析技能元数据失败: {skill_md}, 错误: {e}")
                continue

            self._skills[skill_dir.name] = SkillMetadata(
                id=skill_dir.name,
                name=metadata.get("name", skill_dir.name),
                description=metadata.get("description", ""),
                resources=sorted(
                    md_file.stem for md_file in skill_dir.glob("*.md") if md_file.name != "SKILL.md"
                ),
            )

        logger.debug(f"已加载 {len(self._skills)} 个技能: {', '.join(self._skills)}")

    def _get(self, skill_id: str) -> SkillMetadata:
        skill = self._skills.get(skill_id)
        if skill is None:
            raise OfficeSkillError(
                f"未知技能: {skill_id}，可用: {', '.join(self._skills)}",
                FailureType.VALIDATION_ERROR
            )
        return skill

    def list_skills(self) -> List[SkillMetadata]:
        """第一层：所有技能的元数据"""
        return list(self._skills.values())

    def load_core(self, skill_id: str) -> str:
        """第二层：SKILL.md 正文（不含 front matter）"""
        self._get(skill_id)
        content = (self.root / skill_id / "SKILL.md").read_text(encoding="utf-8")
        return split_front_matter(content)[1]

    def load_resource(self, skill_id: str, resource: str) -> str:
        """第三层：附加资源"""
        skill = self._get(skill_id)
        if resource not in skill.resources:
            raise OfficeSkillError(
                f"技能 {skill_id} 没有资源 {resource}，可用: {', '.join(skill.resources) or '无'}",
                FailureType.VALIDATION_ERROR
            )
        return (self.root / skill_id / f"{resource}.md").read_text(encoding="utf-8")


_global_registry: Optional[SkillRegistry] = None


def get_registry() -> SkillRegistry:
    """获取全局技能注册表"""
    global _global_registry
    if _global_registry is None:
        _global_registry = SkillRegistry()
    return _global_registry
