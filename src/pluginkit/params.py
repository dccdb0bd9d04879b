from __future__ import annotations

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import typer

from pluginkit.errors import ValidationError
from pluginkit.models import DEFAULT_VERSION, Author, UnitDescriptor, default_description

logger = logging.getLogger(__name__)


class ParameterSource(ABC):
    """Where values come from when a flag was not given."""

    interactive: bool = False

    @abstractmethod
    def ask(self, label: str, default: str = "") -> str:
        raise NotImplementedError


class StaticDefaultSource(ParameterSource):
    def ask(self, label: str, default: str = "") -> str:
        del label
        return default


class InteractivePromptSource(ParameterSource):
    interactive = True

    def ask(self, label: str, default: str = "") -> str:
        answer = typer.prompt(label, default=default, show_default=bool(default))
        return str(answer).strip() or default


def select_parameter_source(non_interactive: bool, stdin: TextIO | None = None) -> ParameterSource:
    stream = stdin if stdin is not None else sys.stdin
    if non_interactive or not stream.isatty():
        return StaticDefaultSource()
    return InteractivePromptSource()


def parse_keywords(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [k.strip() for k in raw.split(",") if k.strip()]


def git_config(key: str, cwd: Path) -> str:
    try:
        proc = subprocess.run(
            ["git", "-C", str(cwd), "config", "--get", key],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        logger.debug("git unavailable while reading %s: %s", key, exc)
        return ""
    if proc.returncode != 0:
        return ""
    return proc.stdout.strip()


@dataclass(slots=True)
class ParameterDefaults:
    author_name: str = ""
    repository: str = ""

    @classmethod
    def discover(cls, root: Path) -> ParameterDefaults:
        return cls(
            author_name=git_config("user.name", root),
            repository=git_config("remote.origin.url", root),
        )


@dataclass(slots=True)
class ParameterRequest:
    name: str | None
    description: str | None = None
    version: str | None = None
    author: str | None = None
    author_url: str | None = None
    keywords: str | None = None
    repository: str | None = None
    license: str | None = None
    non_interactive: bool = False


def require_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Plugin name is required")
    if cleaned in {".", ".."} or "/" in cleaned or "\\" in cleaned:
        raise ValidationError(f"Plugin name must be a single path segment: {cleaned!r}")
    return cleaned


def collect_parameters(
    request: ParameterRequest,
    source: ParameterSource,
    *,
    defaults: ParameterDefaults | None = None,
) -> UnitDescriptor:
    name = require_name(request.name)
    defaults = defaults or ParameterDefaults()

    def resolve(value: str | None, label: str, default: str) -> str:
        if value:
            return value.strip()
        return source.ask(label, default).strip()

    description = resolve(request.description, "Description", default_description(name))
    version = resolve(request.version, "Version", DEFAULT_VERSION)
    author_name = resolve(request.author, "Author name", defaults.author_name)

    # optional fields are only offered at the terminal, never defaulted there
    author_url = resolve(request.author_url, "Author URL (optional)", "")
    keywords = resolve(request.keywords, "Keywords (comma-separated, optional)", "")
    repository = resolve(request.repository, "Repository URL (optional)", "")
    license_id = resolve(request.license, "License (optional)", "")

    author = Author(name=author_name, url=author_url)
    return UnitDescriptor(
        name=name,
        version=version,
        description=description,
        author=None if author.is_empty() else author,
        repository=repository or defaults.repository,
        license=license_id,
        keywords=parse_keywords(keywords),
    )
