"""Tests for catalog diffing."""

from verbi.translation.differ import DiffStatus, diff_catalogs, filter_items_for_translation


class TestDiffCatalogs:
    def test_missing_key_is_new(self):
        [item] = diff_catalogs({"Save": "Save"}, {})
        assert item.key == "Save"
        assert item.text == "Save"
        assert item.status is DiffStatus.new

    def test_empty_target_value_is_new(self):
        [item] = diff_catalogs({"Save": "Save"}, {"Save": ""})
        assert item.status is DiffStatus.new

    def test_different_value_is_changed(self):
        [item] = diff_catalogs({"Save": "Save"}, {"Save": "Guardar"})
        assert item.status is DiffStatus.changed
        assert item.text == "Save"
        assert item.previous_text == "Guardar"

    def test_identical_value_omitted(self):
        assert diff_catalogs({"OK": "OK"}, {"OK": "OK"}) == []

    def test_target_only_key_is_deleted(self):
        [item] = diff_catalogs({}, {"Old": "Viejo"})
        assert item.status is DiffStatus.deleted
        assert item.text == "Viejo"

    def test_deleted_items_come_last(self):
        items = diff_catalogs({"A": "A", "B": "B"}, {"Z": "z", "B": "b"})
        assert [(i.key, i.status) for i in items] == [
            ("A", DiffStatus.new),
            ("B", DiffStatus.changed),
            ("Z", DiffStatus.deleted),
        ]


class TestFilter:
    def test_keeps_new_and_changed(self):
        items = diff_catalogs({"A": "A", "B": "B"}, {"B": "b", "Z": "z"})
        assert [i.key for i in filter_items_for_translation(items)] == ["A", "B"]
