from __future__ import annotations

import re
from typing import Mapping

from pluginkit.errors import RenderError

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")


def placeholders(template: str) -> set[str]:
    return set(PLACEHOLDER_PATTERN.findall(template))


def render(template: str, values: Mapping[str, str], *, name: str = "<template>") -> str:
    """Substitute ``{{ field }}`` placeholders from ``values``.

    Every placeholder must resolve; leftovers raise ``RenderError`` instead of
    being copied into the output.
    """
    missing = sorted(placeholders(template) - set(values))
    if missing:
        raise RenderError(f"Unresolved placeholders in {name}: {', '.join(missing)}")
    return PLACEHOLDER_PATTERN.sub(lambda m: str(values[m.group(1)]), template)


PLUGIN_README = """# {{ name }}

{{ description }}

## Contents

- commands/: command markdown definitions
- agents/: agent definitions
- .claude-plugin/plugin.json: plugin manifest
"""


DEVENV_NIX = """# devenv.nix - Base Python development environment
{
  pkgs,
  lib,
  config,
  inputs,
  ...
}:

{
  # Python configuration
  languages.python = {
    enable = true;
    version = "{{ python_version }}";
    uv.enable = true;
  };

  # Development packages
  packages = [
    pkgs.ruff
    pkgs.nixfmt-rfc-style
    pkgs.treefmt
  ];

  # Git hooks
  git-hooks.hooks = {
    ruff.enable = true;
    ruff-format.enable = true;
    nixfmt-rfc-style.enable = true;
  };

  # Shell initialization
  enterShell = ''
    echo ""
    echo "Python Development Environment"
    echo "=============================="
    echo "Python: $(python --version)"
    echo "uv: $(uv --version)"
    echo ""
    echo "Commands:"
    echo "  uv sync          - Install dependencies"
    echo "  uv add <pkg>     - Add dependency"
    echo "  ruff check .     - Run linter"
    echo "  ruff format .    - Format code"
    echo "  uv run ty check  - Type check"
    echo "  treefmt          - Format all files"
    echo ""
  '';
}
"""


DEVENV_YAML = """inputs:
  nixpkgs:
    url: github:cachix/devenv-nixpkgs/rolling
  nixpkgs-python:
    url: github:cachix/nixpkgs-python
    inputs:
      nixpkgs:
        follows: nixpkgs
"""


ENVRC = """#!/usr/bin/env bash

export DIRENV_WARN_TIMEOUT=20s

eval "$(devenv direnvrc)"

use devenv
"""


TREEFMT_TOML = """[formatter.ruff-check]
command = "ruff"
options = ["check", "--fix"]
includes = ["*.py"]

[formatter.ruff-format]
command = "ruff"
options = ["format"]
includes = ["*.py"]

[formatter.nixfmt]
command = "nixfmt"
includes = ["*.nix"]
"""


GITIGNORE = """# Python
__pycache__/
*.py[cod]
*.egg-info/
dist/
build/
.venv/
.pytest_cache/
.ruff_cache/
.coverage

# devenv
.devenv*
devenv.local.nix
.direnv
.pre-commit-config.yaml

# Environment
.env
"""


PYPROJECT_TOML = """[project]
name = "{{ project_name }}"
version = "0.1.0"
description = ""
readme = "README.md"
requires-python = ">={{ python_version }}"
dependencies = []

[dependency-groups]
dev = [
    "pytest",
    "ruff",
    "ty",
]

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[tool.hatch.build.targets.wheel]
packages = ["src/{{ package_name }}"]

[tool.ruff]
target-version = "{{ python_short }}"
line-length = 100

[tool.ruff.lint]
select = ["E", "F", "I", "UP", "B"]

[tool.ty.environment]
python-version = "{{ python_version }}"

[tool.pytest.ini_options]
testpaths = ["tests"]
"""


DEVENV_TEMPLATES: dict[str, str] = {
    "devenv.yaml": DEVENV_YAML,
    ".envrc": ENVRC,
    "treefmt.toml": TREEFMT_TOML,
    ".gitignore": GITIGNORE,
    "devenv.nix": DEVENV_NIX,
    "pyproject.toml": PYPROJECT_TOML,
}
