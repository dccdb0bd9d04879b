import json

from pluginkit.models import Author, UnitDescriptor


def test_as_dict_omits_empty_optional_fields():
    data = UnitDescriptor(name="widget-x", description="d").as_dict()
    assert data == {"name": "widget-x", "version": "0.1.0", "description": "d"}


def test_author_with_name_only_serializes_name_key():
    d = UnitDescriptor(name="x", author=Author(name="Ada"))
    assert d.as_dict()["author"] == {"name": "Ada"}
    assert d.registry_entry("./plugins/x")["author"] == {"name": "Ada"}


def test_empty_author_is_dropped():
    d = UnitDescriptor(name="x", author=Author())
    assert "author" not in d.as_dict()
    assert "author" not in d.registry_entry("./plugins/x")


def test_registry_entry_shape():
    d = UnitDescriptor(
        name="x",
        version="1.2.3",
        description="desc",
        author=Author(name="Ada", url="https://ada.dev"),
        repository="git@example.org:x.git",
        license="MIT",
        keywords=["a", "b"],
    )
    entry = d.registry_entry("./plugins/x")
    assert list(entry) == ["name", "description", "source", "version", "author", "keywords"]
    assert entry["source"] == "./plugins/x"
    assert "repository" not in entry
    assert "license" not in entry


def test_descriptor_survives_json_round_trip():
    d = UnitDescriptor(
        name="widget-x",
        version="0.2.0",
        description="Widgets",
        author=Author(url="https://example.org"),
        repository="https://example.org/repo.git",
        license="Apache-2.0",
        keywords=["a", "b", "c"],
    )
    again = UnitDescriptor.from_dict(json.loads(json.dumps(d.as_dict())))
    assert again == d


def test_from_dict_tolerates_null_keywords():
    d = UnitDescriptor.from_dict({"name": "x", "version": "1.0.0", "description": "d", "keywords": None})
    assert d.keywords == []
