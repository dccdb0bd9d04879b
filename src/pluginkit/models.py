from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_VERSION = "0.1.0"


def default_description(name: str) -> str:
    return f"TODO: describe {name}"


@dataclass(slots=True)
class Author:
    name: str = ""
    url: str = ""

    def is_empty(self) -> bool:
        return not (self.name or self.url)

    def as_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.name:
            out["name"] = self.name
        if self.url:
            out["url"] = self.url
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Author:
        return cls(name=str(data.get("name", "")), url=str(data.get("url", "")))


@dataclass(slots=True)
class UnitDescriptor:
    name: str
    version: str = DEFAULT_VERSION
    description: str = ""
    author: Author | None = None
    repository: str = ""
    license: str = ""
    keywords: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "description": self.description,
        }
        if self.author is not None and not self.author.is_empty():
            data["author"] = self.author.as_dict()
        if self.repository:
            data["repository"] = self.repository
        if self.license:
            data["license"] = self.license
        if self.keywords:
            data["keywords"] = list(self.keywords)
        return data

    def registry_entry(self, source: str) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "source": source,
            "version": self.version,
        }
        if self.author is not None and not self.author.is_empty():
            entry["author"] = self.author.as_dict()
        if self.keywords:
            entry["keywords"] = list(self.keywords)
        return entry

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnitDescriptor:
        raw_author = data.get("author")
        author = Author.from_dict(raw_author) if isinstance(raw_author, dict) else None
        if author is not None and author.is_empty():
            author = None
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
            author=author,
            repository=str(data.get("repository", "")),
            license=str(data.get("license", "")),
            keywords=[str(k) for k in data.get("keywords") or []],
        )
