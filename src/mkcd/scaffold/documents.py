"""Document generation for new workspaces.

Produces README, .gitignore and LICENSE content from the package's
bundled templates. Flavors are looked up by name in a fixed registry;
an unknown flavor is a NotFoundError listing what is available, never
a silent fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from string import Template

from mkcd.errors import NotFoundError

# Flavor name -> template file, relative to the templates directory
GITIGNORE_FLAVORS: dict[str, str] = {
    "general": "gitignore/general",
    "go": "gitignore/go",
    "node": "gitignore/node",
    "python": "gitignore/python",
}

LICENSE_FLAVORS: dict[str, str] = {
    "mit": "license/mit",
    "apache-2.0": "license/apache-2.0",
}


def _get_templates_dir() -> Path:
    """Return the path to the templates directory within the package."""
    return Path(__file__).parent / "templates"


@dataclass(frozen=True)
class GenerationContext:
    """Values available to document templates."""

    project_path: Path
    author: str = ""
    email: str = ""
    today: date = field(default_factory=date.today)

    @property
    def project(self) -> str:
        return self.project_path.name

    def substitutions(self) -> dict[str, str]:
        author = self.author or "The " + self.project + " authors"
        author_line = author
        if self.email:
            author_line += f" <{self.email}>"
        return {
            "project": self.project,
            "author": author,
            "author_line": author_line,
            "email": self.email,
            "year": str(self.today.year),
            "date": self.today.isoformat(),
        }


@dataclass(frozen=True)
class Document:
    """A generated file: name relative to the project root, and its content."""

    filename: str
    content: str


class DocumentGenerator:
    """Renders the README, ignore-file and license documents."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or _get_templates_dir()

    def _read(self, relative: str) -> str:
        return (self.templates_dir / relative).read_text(encoding="utf-8")

    def readme(self, ctx: GenerationContext) -> Document:
        content = Template(self._read("README.md.tmpl")).safe_substitute(ctx.substitutions())
        return Document("README.md", content)

    def gitignore(self, flavor: str) -> Document:
        relative = _lookup("gitignore flavor", flavor, GITIGNORE_FLAVORS)
        return Document(".gitignore", self._read(relative))

    def license(self, flavor: str, ctx: GenerationContext) -> Document:
        relative = _lookup("license", flavor, LICENSE_FLAVORS)
        content = Template(self._read(relative)).safe_substitute(ctx.substitutions())
        return Document("LICENSE", content)


def _lookup(kind: str, flavor: str, registry: dict[str, str]) -> str:
    try:
        return registry[flavor.lower()]
    except KeyError:
        raise NotFoundError(kind, flavor, sorted(registry)) from None
