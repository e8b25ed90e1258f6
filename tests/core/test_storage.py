"""Tests for JSON record storage."""

from playhead.core.storage import delete_record, get_storage_path, load_record, save_record


class TestStorage:
    """Test load/save/delete of named records."""

    def test_save_then_load(self, data_dir):
        assert save_record("player-storage", {"volume": 0.5, "history": []}, data_dir)
        assert load_record("player-storage", data_dir) == {"volume": 0.5, "history": []}

    def test_path_naming(self, data_dir):
        assert get_storage_path("stats-storage", data_dir) == data_dir / "stats-storage.json"

    def test_default_location_is_data_dir(self, tmp_path):
        save_record("progress-storage", {"records": {}})
        assert (tmp_path / "data" / "playhead" / "progress-storage.json").exists()

    def test_missing_record(self, data_dir):
        assert load_record("nothing", data_dir) is None

    def test_corrupt_record(self, data_dir):
        get_storage_path("bad", data_dir).write_text("{oops", encoding="utf-8")
        assert load_record("bad", data_dir) is None

    def test_non_object_record(self, data_dir):
        get_storage_path("list", data_dir).write_text("[1, 2]", encoding="utf-8")
        assert load_record("list", data_dir) is None

    def test_unserializable_data_returns_false(self, data_dir):
        assert save_record("odd", {"value": object()}, data_dir) is False
        assert not get_storage_path("odd", data_dir).exists()
        assert list(data_dir.iterdir()) == []

    def test_overwrite_is_atomic(self, data_dir):
        save_record("rec", {"n": 1}, data_dir)
        save_record("rec", {"n": 2}, data_dir)
        assert load_record("rec", data_dir) == {"n": 2}
        assert [p.name for p in data_dir.iterdir()] == ["rec.json"]

    def test_delete(self, data_dir):
        save_record("rec", {"n": 1}, data_dir)
        delete_record("rec", data_dir)
        delete_record("rec", data_dir)
        assert load_record("rec", data_dir) is None
