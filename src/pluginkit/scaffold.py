from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pluginkit.errors import DuplicateNameError, PreconditionError, WriteError
from pluginkit.models import UnitDescriptor
from pluginkit.params import (
    ParameterDefaults,
    ParameterRequest,
    ParameterSource,
    collect_parameters,
    require_name,
)
from pluginkit.registry import ManifestRegistry
from pluginkit.templates import PLUGIN_README, render

logger = logging.getLogger(__name__)

MANIFEST_DIRNAME = ".claude-plugin"
PLUGIN_MANIFEST = "plugin.json"
README_NAME = "README.md"
PLACEHOLDER_DIRS = ("agents", "commands")


@dataclass(frozen=True, slots=True)
class Workspace:
    root: Path
    marketplace_path: Path
    plugins_dir: Path

    @classmethod
    def from_root(cls, root: Path) -> Workspace:
        root = root.resolve()
        return cls(
            root=root,
            marketplace_path=root / MANIFEST_DIRNAME / "marketplace.json",
            plugins_dir=root / "plugins",
        )

    def unit_dir(self, name: str) -> Path:
        return self.plugins_dir / name

    def source_for(self, name: str) -> str:
        try:
            rel = self.plugins_dir.relative_to(self.root).as_posix()
        except ValueError:
            return self.unit_dir(name).as_posix()
        return f"./{rel}/{name}"


class Scaffolder:
    """Create a plugin directory and register it in the marketplace.

    Steps run in a fixed order and never roll back. Anything written before a
    failing step stays on disk and has to be removed by hand before a re-run
    with the same name.
    """

    def __init__(
        self,
        workspace: Workspace,
        source: ParameterSource,
        defaults: ParameterDefaults | None = None,
    ) -> None:
        self.workspace = workspace
        self.source = source
        self.defaults = defaults
        self.registry = ManifestRegistry(workspace.marketplace_path)

    def run(self, request: ParameterRequest) -> Path:
        name = require_name(request.name)
        unit_dir = self.workspace.unit_dir(name)

        self._validate_preconditions(unit_dir, name)

        logger.debug("collecting parameters for %s", name)
        defaults = self.defaults or ParameterDefaults.discover(self.workspace.root)
        descriptor = collect_parameters(request, self.source, defaults=defaults)

        self._create_directory_tree(unit_dir)
        self._render_templates(unit_dir, descriptor)
        write_unit_manifest(unit_dir, descriptor)

        logger.debug("registering %s in %s", name, self.registry.path)
        self.registry.append(descriptor.registry_entry(self.workspace.source_for(name)))
        return unit_dir

    def _validate_preconditions(self, unit_dir: Path, name: str) -> None:
        logger.debug("validating preconditions for %s", unit_dir)
        if not self.workspace.marketplace_path.is_file():
            raise PreconditionError(f"Missing marketplace file: {self.workspace.marketplace_path}")
        self.registry.load()
        # a registered name is reported as a conflict even when its directory is also present
        if self.registry.exists(name):
            raise DuplicateNameError(name)
        if unit_dir.exists():
            raise PreconditionError(f"Plugin directory already exists: {unit_dir}")

    def _create_directory_tree(self, unit_dir: Path) -> None:
        logger.debug("creating %s", unit_dir)
        try:
            (unit_dir / MANIFEST_DIRNAME).mkdir(parents=True)
            for sub in PLACEHOLDER_DIRS:
                (unit_dir / sub).mkdir()
        except OSError as exc:
            raise PreconditionError(f"Cannot create plugin directory {unit_dir}: {exc}") from exc

    def _render_templates(self, unit_dir: Path, descriptor: UnitDescriptor) -> None:
        readme = render(
            PLUGIN_README,
            {"name": descriptor.name, "description": descriptor.description},
            name=README_NAME,
        )
        _write(unit_dir / README_NAME, readme)
        for sub in PLACEHOLDER_DIRS:
            _write(unit_dir / sub / ".gitkeep", "")


def write_unit_manifest(unit_dir: Path, descriptor: UnitDescriptor) -> Path:
    path = unit_dir / MANIFEST_DIRNAME / PLUGIN_MANIFEST
    _write(path, json.dumps(descriptor.as_dict(), indent=2, ensure_ascii=False) + "\n")
    return path


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write {path}: {exc}") from exc


def read_unit_manifest(unit_dir: Path) -> UnitDescriptor:
    path = unit_dir / MANIFEST_DIRNAME / PLUGIN_MANIFEST
    return UnitDescriptor.from_dict(json.loads(path.read_text(encoding="utf-8")))
