from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Sequence

from pluginkit.errors import CommandError, PreconditionError, ValidationError, WriteError
from pluginkit.templates import DEVENV_TEMPLATES, render

logger = logging.getLogger(__name__)

DEFAULT_PYTHON_VERSION = "3.12"

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(slots=True)
class DevenvSettings:
    project_name: str
    python_version: str = DEFAULT_PYTHON_VERSION
    deps: tuple[str, ...] = ()
    dev_deps: tuple[str, ...] = ()
    target_dir: Path = Path(".")

    @property
    def package_name(self) -> str:
        return self.project_name.replace("-", "_")

    @property
    def python_short(self) -> str:
        return "py" + self.python_version.replace(".", "")

    def template_values(self) -> dict[str, str]:
        return {
            "project_name": self.project_name,
            "package_name": self.package_name,
            "python_version": self.python_version,
            "python_short": self.python_short,
        }


@dataclass(slots=True)
class DevenvResult:
    files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)
    commands: list[list[str]] = field(default_factory=list)


def settings_from_env(environ: Mapping[str, str]) -> DevenvSettings:
    project_name = environ.get("PROJECT_NAME", "").strip()
    if not project_name:
        raise ValidationError("PROJECT_NAME is required")
    return DevenvSettings(
        project_name=project_name,
        python_version=environ.get("PYTHON_VERSION", "").strip() or DEFAULT_PYTHON_VERSION,
        deps=tuple(environ.get("DEPS", "").split()),
        dev_deps=tuple(environ.get("DEV_DEPS", "").split()),
        target_dir=Path(environ.get("TARGET_DIR", "").strip() or "."),
    )


def setup_devenv(settings: DevenvSettings, runner: Runner = subprocess.run) -> DevenvResult:
    if not settings.project_name.strip():
        raise ValidationError("PROJECT_NAME is required")
    target = settings.target_dir
    if not target.is_dir():
        raise PreconditionError(f"Target directory does not exist: {target}")

    result = DevenvResult()
    values = settings.template_values()
    for filename, template in DEVENV_TEMPLATES.items():
        path = target / filename
        content = render(template, values, name=filename)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise WriteError(f"Failed to write {path}: {exc}") from exc
        result.files.append(path)

    for pkg_dir in (target / "src" / settings.package_name, target / "tests"):
        try:
            pkg_dir.mkdir(parents=True, exist_ok=True)
            (pkg_dir / "__init__.py").touch()
        except OSError as exc:
            raise WriteError(f"Failed to create {pkg_dir}: {exc}") from exc
        result.directories.append(pkg_dir)

    if settings.deps:
        result.commands.append(_uv_add(target, ["uv", "add", *settings.deps], runner))
    if settings.dev_deps:
        result.commands.append(_uv_add(target, ["uv", "add", "--group", "dev", *settings.dev_deps], runner))
    return result


def _uv_add(target: Path, cmd: Sequence[str], runner: Runner) -> list[str]:
    cmd = list(cmd)
    logger.info("running %s in %s", " ".join(cmd), target)
    try:
        proc = runner(cmd, cwd=target, check=False)
    except FileNotFoundError as exc:
        raise PreconditionError("uv not found on PATH; install it from https://docs.astral.sh/uv/") from exc
    if proc.returncode != 0:
        raise CommandError(cmd, proc.returncode)
    return cmd
