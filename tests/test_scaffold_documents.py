"""Tests for document generation and local templates."""

from datetime import date
from pathlib import Path

import pytest

from mkcd.errors import NotFoundError
from mkcd.scaffold.documents import GITIGNORE_FLAVORS, DocumentGenerator, GenerationContext
from mkcd.scaffold.local_templates import apply_template, find_template, template_files

CTX = GenerationContext(
    project_path=Path("/home/ada/analytical-engine"),
    author="Ada Lovelace",
    email="ada@example.com",
    today=date(2026, 5, 1),
)


class TestDocumentGenerator:
    def test_readme(self):
        doc = DocumentGenerator().readme(CTX)
        assert doc.filename == "README.md"
        assert doc.content.startswith("# analytical-engine")
        assert "2026-05-01" in doc.content
        assert "Ada Lovelace <ada@example.com>" in doc.content

    @pytest.mark.parametrize("flavor", sorted(GITIGNORE_FLAVORS))
    def test_every_gitignore_flavor_renders(self, flavor):
        doc = DocumentGenerator().gitignore(flavor)
        assert doc.filename == ".gitignore"
        assert doc.content.strip()

    def test_python_gitignore_keeps_dollar(self):
        """Ignore files are not templated, so '$' survives."""
        assert "*$py.class" in DocumentGenerator().gitignore("python").content

    def test_mit_license(self):
        doc = DocumentGenerator().license("mit", CTX)
        assert doc.filename == "LICENSE"
        assert "MIT License" in doc.content
        assert "Copyright (c) 2026 Ada Lovelace" in doc.content

    def test_apache_license_case_insensitive(self):
        doc = DocumentGenerator().license("Apache-2.0", CTX)
        assert "Apache License" in doc.content
        assert "2026" in doc.content

    def test_unknown_flavors(self):
        with pytest.raises(NotFoundError) as exc_info:
            DocumentGenerator().gitignore("cobol")
        assert "python" in exc_info.value.available
        with pytest.raises(NotFoundError):
            DocumentGenerator().license("gpl-3.0", CTX)

    def test_author_fallback(self):
        ctx = GenerationContext(project_path=Path("/x/demo"), today=date(2026, 1, 1))
        assert "The demo authors" in DocumentGenerator().license("mit", ctx).content


class TestLocalTemplates:
    def _make_template(self, root: Path) -> Path:
        template = root / "basic"
        (template / "src").mkdir(parents=True)
        (template / "src" / "main.py").write_text("print('hi')\n", encoding="utf-8")
        (template / "Makefile").write_text("all:\n", encoding="utf-8")
        return template

    def test_find_template(self, tmp_path):
        template = self._make_template(tmp_path)
        assert find_template(tmp_path, "basic") == template

    @pytest.mark.parametrize("name", ["missing", "", "../basic", "basic/src"])
    def test_find_rejects(self, tmp_path, name):
        self._make_template(tmp_path)
        with pytest.raises(NotFoundError):
            find_template(tmp_path, name)

    def test_missing_templates_directory(self, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            find_template(tmp_path / "nope", "basic")
        assert exc_info.value.available == []

    def test_apply_skips_existing(self, tmp_path):
        template = self._make_template(tmp_path / "templates")
        target = tmp_path / "proj"
        target.mkdir()
        (target / "Makefile").write_text("mine\n", encoding="utf-8")

        copied = apply_template(template, target)
        assert copied == [str(Path("src") / "main.py")]
        assert (target / "Makefile").read_text(encoding="utf-8") == "mine\n"
        assert template_files(template) == [Path("Makefile"), Path("src/main.py")]
