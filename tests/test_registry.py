import json
from pathlib import Path

import pytest

from pluginkit.errors import (
    DuplicateNameError,
    PreconditionError,
    RegistryCorruptError,
    RegistryWriteError,
)
from pluginkit.registry import ManifestRegistry


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_missing_file_is_precondition_error(tmp_path: Path):
    with pytest.raises(PreconditionError, match="Missing marketplace file"):
        ManifestRegistry(tmp_path / "marketplace.json").load()


@pytest.mark.parametrize(
    "content",
    ["{not json", "[]", '{"plugins": {}}', '{"plugins": ["x"]}'],
)
def test_load_rejects_corrupt_documents(tmp_path: Path, content: str):
    path = tmp_path / "marketplace.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(RegistryCorruptError):
        ManifestRegistry(path).load()


def test_absent_plugins_key_means_empty(tmp_path: Path):
    registry = ManifestRegistry(_write(tmp_path / "m.json", {"name": "market"})).load()
    assert registry.entries == []
    assert not registry.exists("x")


def test_exists_is_exact_and_case_sensitive(tmp_path: Path):
    registry = ManifestRegistry(_write(tmp_path / "m.json", {"plugins": [{"name": "Widget"}]})).load()
    assert registry.exists("Widget")
    assert not registry.exists("widget")


def test_append_persists_and_preserves_other_keys(tmp_path: Path):
    path = _write(tmp_path / "m.json", {"name": "market", "owner": {"name": "o"}, "plugins": [{"name": "a"}]})
    registry = ManifestRegistry(path).load()
    registry.append({"name": "b", "source": "./plugins/b"})

    data = json.loads(path.read_text(encoding="utf-8"))
    assert [p["name"] for p in data["plugins"]] == ["a", "b"]
    assert data["owner"] == {"name": "o"}
    assert path.read_text(encoding="utf-8").endswith("}\n")


def test_append_duplicate_leaves_file_untouched(tmp_path: Path):
    path = _write(tmp_path / "m.json", {"plugins": [{"name": "a"}]})
    before = path.read_bytes()
    registry = ManifestRegistry(path).load()
    with pytest.raises(DuplicateNameError):
        registry.append({"name": "a"})
    assert path.read_bytes() == before


def test_save_refuses_when_file_changed_since_load(tmp_path: Path):
    path = _write(tmp_path / "m.json", {"plugins": []})
    registry = ManifestRegistry(path).load()
    _write(path, {"plugins": [{"name": "sneaky"}]})
    with pytest.raises(RegistryWriteError, match="changed on disk"):
        registry.append({"name": "b"})
    assert json.loads(path.read_text(encoding="utf-8"))["plugins"] == [{"name": "sneaky"}]


def test_consecutive_appends_track_own_writes(tmp_path: Path):
    path = _write(tmp_path / "m.json", {"plugins": []})
    registry = ManifestRegistry(path).load()
    registry.append({"name": "a"})
    registry.append({"name": "b"})
    assert [p["name"] for p in json.loads(path.read_text(encoding="utf-8"))["plugins"]] == ["a", "b"]


def test_non_ascii_is_written_verbatim(tmp_path: Path):
    path = _write(tmp_path / "m.json", {"plugins": []})
    ManifestRegistry(path).load().append({"name": "héllo"})
    assert "héllo" in path.read_text(encoding="utf-8")
