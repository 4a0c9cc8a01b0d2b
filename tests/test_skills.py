"""
测试技能文档注册表
"""

import pytest

from office_skills.models import OfficeSkillError, FailureType
from office_skills.skills import SkillRegistry, split_front_matter, get_registry


class TestSplitFrontMatter:
    """测试front matter解析"""

    def test_with_front_matter(self):
        metadata, body = split_front_matter("---\nname: Demo\ndescription: A demo\n---\n\n# Body\n")

        assert metadata == {"name": "Demo", "description": "A demo"}
        assert body == "# Body"

    def test_without_front_matter(self):
        assert split_front_matter("# Only body\n") == ({}, "# Only body")

    def test_unterminated(self):
        metadata, body = split_front_matter("---\nname: x\n# Body")

        assert metadata == {}
        assert body.startswith("---")


class TestBundledSkills:
    """测试随包发布的技能文档"""

    def test_list_skills(self):
        skills = {skill.id: skill for skill in SkillRegistry().list_skills()}

        assert sorted(skills) == ["docx", "pdf", "pptx", "xlsx"]
        assert all(skill.name and skill.description for skill in skills.values())
        assert skills["xlsx"].resources == ["formatting", "recalc"]
        assert skills["pdf"].resources == ["ocr", "tables"]
        assert skills["pptx"].resources == ["replace"]

    def test_load_core(self):
        body = SkillRegistry().load_core("xlsx")

        assert not body.startswith("---")
        assert "office-recalc" in body

    def test_load_resource(self):
        content = SkillRegistry().load_resource("xlsx", "recalc")

        assert "error_summary" in content

    def test_unknown_skill(self):
        with pytest.raises(OfficeSkillError) as exc_info:
            SkillRegistry().load_core("odt")

        assert exc_info.value.failure_type == FailureType.VALIDATION_ERROR

    def test_unknown_resource(self):
        with pytest.raises(OfficeSkillError) as exc_info:
            SkillRegistry().load_resource("docx", "tables")

        assert exc_info.value.failure_type == FailureType.VALIDATION_ERROR

    def test_global_registry(self):
        assert get_registry() is get_registry()


class TestCustomRoot:
    """测试自定义技能目录"""

    def test_discovery(self, tmp_path):
        good = tmp_path / "csv"
        good.mkdir()
        (good / "SKILL.md").write_text("---\nname: CSV\ndescription: Tables\n---\nUse pandas.", encoding="utf-8")
        (good / "dialects.md").write_text("# Dialects", encoding="utf-8")

        broken = tmp_path / "broken"
        broken.mkdir()
        (broken / "SKILL.md").write_text("---\nname: [unclosed\n---\nbody", encoding="utf-8")

        (tmp_path / "no-skill").mkdir()
        (tmp_path / "README.md").write_text("not a skill", encoding="utf-8")

        registry = SkillRegistry(tmp_path)

        assert [skill.id for skill in registry.list_skills()] == ["csv"]
        assert registry.list_skills()[0].resources == ["dialects"]
        assert registry.load_core("csv") == "Use pandas."

    def test_missing_root(self, tmp_path):
        assert SkillRegistry(tmp_path / "none").list_skills() == []
