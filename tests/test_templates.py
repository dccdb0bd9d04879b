import pytest

from pluginkit.errors import RenderError
from pluginkit.templates import DEVENV_TEMPLATES, PLUGIN_README, placeholders, render


def test_render_substitutes_named_fields():
    out = render("# {{ name }}\n{{description}}\n", {"name": "w", "description": "d"})
    assert out == "# w\nd\n"


def test_render_fails_on_unresolved_placeholder():
    with pytest.raises(RenderError, match="README.md: description"):
        render(PLUGIN_README, {"name": "w"}, name="README.md")


def test_render_leaves_shell_substitutions_alone():
    values = {"project_name": "p", "package_name": "p", "python_version": "3.12", "python_short": "py312"}
    out = render(DEVENV_TEMPLATES["devenv.nix"], values)
    assert "$(python --version)" in out
    assert 'version = "3.12";' in out


def test_devenv_templates_only_use_known_fields():
    known = {"project_name", "package_name", "python_version", "python_short"}
    for template in DEVENV_TEMPLATES.values():
        assert placeholders(template) <= known
