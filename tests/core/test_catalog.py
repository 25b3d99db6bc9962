"""Tests for catalog reading and writing."""

import json

import pytest

from tests.conftest import make_config, make_message
from verbi.core.catalog import (
    KEY_MAP_PATH,
    build_catalogs,
    load_catalog,
    load_source_catalog,
    namespace_of,
    save_catalog,
)


class TestNamespaces:
    def test_file_strategy(self):
        assert namespace_of(make_message("a", file="components/Counter.tsx"), "file") == "components.Counter"

    def test_directory_strategy(self):
        assert namespace_of(make_message("a", file="src/pages/Home.tsx"), "directory") == "src.pages"

    def test_directory_strategy_top_level(self):
        assert namespace_of(make_message("a", file="main.tsx"), "directory") == "root"

    def test_flat_strategy(self):
        assert namespace_of(make_message("a", file="src/pages/Home.tsx"), "flat") == "messages"

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            namespace_of(make_message("a"), "nested")


class TestBuildCatalogs:
    def test_writes_one_file_per_namespace(self, tmp_path):
        config = make_config(tmp_path)
        messages = [
            make_message("Save", file="components/Button.tsx", line=3, column=4),
            make_message("Cancel", file="components/Dialog.tsx"),
            make_message("Home", file="src/pages/Home.tsx"),
        ]

        paths = build_catalogs(messages, config)

        source_dir = tmp_path / "messages" / "en"
        assert sorted(p.name for p in paths) == ["components.json", "src.pages.json"]
        data = json.loads((source_dir / "components.json").read_text(encoding="utf-8"))
        assert data["Save"] == {
            "message": "Save",
            "location": {"file": "components/Button.tsx", "line": 3, "column": 4},
        }
        assert list(data) == ["Save", "Cancel"]

    def test_writes_key_map(self, tmp_path):
        config = make_config(tmp_path)
        build_catalogs([make_message("Save")], config)

        key_map = json.loads((tmp_path / "messages" / KEY_MAP_PATH).read_text(encoding="utf-8"))
        assert key_map == [{
            "key": "Save",
            "text": "Save",
            "location": {"file": "components/Button.tsx", "line": 1, "column": 0},
            "explicitKey": False,
        }]

    def test_pretty_json_with_trailing_newline(self, tmp_path):
        config = make_config(tmp_path, namespace_strategy="flat")
        [path] = build_catalogs([make_message("Café")], config)

        content = path.read_text(encoding="utf-8")
        assert content.endswith("}\n")
        assert '  "Café": {' in content

    def test_empty_message_list(self, tmp_path):
        config = make_config(tmp_path)
        assert build_catalogs([], config) == []
        assert (tmp_path / "messages" / "en").is_dir()

    def test_removes_namespaces_no_longer_produced(self, tmp_path):
        config = make_config(tmp_path)
        build_catalogs([
            make_message("Old", file="src/old/A.tsx"),
            make_message("Kept", file="src/new/B.tsx"),
        ], config)

        build_catalogs([make_message("Kept", file="src/new/B.tsx")], config)

        source_dir = tmp_path / "messages" / "en"
        assert sorted(p.name for p in source_dir.rglob("*.json")) == ["src.new.json"]
        assert load_source_catalog(tmp_path / "messages", "en") == {"Kept": "Kept"}

    def test_strategy_change_replaces_files(self, tmp_path):
        messages = [make_message("Save", file="components/Button.tsx")]
        build_catalogs(messages, make_config(tmp_path))

        build_catalogs(messages, make_config(tmp_path, namespace_strategy="flat"))

        assert sorted(p.name for p in (tmp_path / "messages" / "en").iterdir()) == ["messages.json"]

    def test_target_locales_untouched(self, tmp_path):
        config = make_config(tmp_path)
        save_catalog(tmp_path / "messages", "es", {"Old": "Viejo"})

        build_catalogs([], config)

        assert load_catalog(tmp_path / "messages", "es") == {"Old": "Viejo"}


class TestLoadCatalog:
    def test_missing_locale_is_empty(self, tmp_path):
        assert load_catalog(tmp_path / "messages", "es") == {}

    def test_save_then_load(self, tmp_path):
        messages_dir = tmp_path / "messages"
        path = save_catalog(messages_dir, "es", {"Save": "Guardar"})

        assert path == messages_dir / "es" / "messages.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {"Save": {"message": "Guardar"}}
        assert load_catalog(messages_dir, "es") == {"Save": "Guardar"}

    def test_plain_string_values(self, tmp_path):
        locale_dir = tmp_path / "es"
        locale_dir.mkdir()
        (locale_dir / "index.json").write_text('{"Save": "Guardar", "Count": 3}', encoding="utf-8")

        assert load_catalog(tmp_path, "es") == {"Save": "Guardar", "Count": "3"}

    def test_falls_back_to_any_json(self, tmp_path):
        nested = tmp_path / "es" / "pages"
        nested.mkdir(parents=True)
        (nested / "home.json").write_text('{"Home": {"message": "Inicio"}}', encoding="utf-8")

        assert load_catalog(tmp_path, "es") == {"Home": "Inicio"}

    def test_source_catalog_merges_namespaces(self, tmp_path):
        config = make_config(tmp_path)
        build_catalogs([
            make_message("Root", file="main.tsx"),
            make_message("Save", file="components/Button.tsx"),
        ], config)

        assert load_source_catalog(config.messages_dir, "en") == {"Root": "Root", "Save": "Save"}
