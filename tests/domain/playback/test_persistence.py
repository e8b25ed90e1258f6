"""Tests for player preference persistence."""

import json

from playhead.core.storage import get_storage_path, save_record
from playhead.domain.playback.persistence import (
    PERSISTED_KEYS,
    STORAGE_NAME,
    bind_persistence,
    load_player_state,
    partialize,
    rehydrate,
    save_player_state,
)
from playhead.domain.playback.selection import RepeatMode
from playhead.domain.playback.state import PlayerStore


def _read_saved(data_dir) -> dict:
    with open(get_storage_path(STORAGE_NAME, data_dir), encoding="utf-8") as f:
        return json.load(f)


class TestPartialize:
    """Only preferences and history are persisted."""

    def test_keys_are_exactly_the_persisted_subset(self, tracks):
        store = PlayerStore()
        store.play_track(tracks[1], tracks)
        store.report_progress(30.0, duration=100.0)

        record = partialize(store)

        assert tuple(record) == PERSISTED_KEYS
        assert "queue" not in record
        assert "currentTrack" not in record
        assert "currentTime" not in record

    def test_values(self, tracks):
        store = PlayerStore()
        store.set_volume(0.25)
        store.toggle_mute()
        store.toggle_shuffle()
        store.toggle_repeat()
        store.play_track(tracks[0])

        record = partialize(store)

        assert record["volume"] == 0.25
        assert record["isMuted"] is True
        assert record["isShuffled"] is True
        assert record["repeatMode"] == "all"
        assert record["history"][0]["id"] == "A"


class TestRehydrate:
    """Test applying persisted records to a fresh store."""

    def test_round_trip_through_disk(self, data_dir, tracks):
        original = PlayerStore()
        original.set_volume(0.6)
        original.toggle_repeat()
        original.toggle_repeat()
        original.play_track(tracks[0], tracks)
        original.play_track(tracks[2], tracks)
        assert save_player_state(original, data_dir)

        restored = PlayerStore()
        load_player_state(restored, data_dir)

        assert restored.volume == 0.6
        assert restored.repeat_mode == RepeatMode.ONE
        assert [e.track.id for e in restored.history] == ["C", "A"]
        assert restored.history[0].played_at == original.history[0].played_at

    def test_fresh_session_starts_with_empty_queue(self, data_dir, tracks):
        original = PlayerStore()
        original.play_track(tracks[1], tracks)
        save_player_state(original, data_dir)

        restored = PlayerStore()
        load_player_state(restored, data_dir)

        assert restored.queue == ()
        assert restored.current_track is None
        assert restored.is_playing is False

    def test_missing_record_keeps_defaults(self, data_dir):
        store = PlayerStore(volume=0.8)
        load_player_state(store, data_dir)
        assert store.volume == 0.8
        assert store.history == ()

    def test_bad_values_are_ignored(self):
        store = PlayerStore(volume=0.8)
        rehydrate(
            store,
            {
                "volume": "loud",
                "isMuted": "yes",
                "isShuffled": True,
                "repeatMode": "forever",
                "history": [{"title": "no id"}, "garbage", {"id": "X", "title": "Ok"}],
            },
        )
        assert store.volume == 0.8
        assert store.is_muted is False
        assert store.is_shuffled is True
        assert store.repeat_mode == RepeatMode.OFF
        assert [e.track.id for e in store.history] == ["X"]

    def test_corrupt_file_keeps_defaults(self, data_dir):
        get_storage_path(STORAGE_NAME, data_dir).write_text("{not json", encoding="utf-8")
        store = PlayerStore(volume=0.4)
        load_player_state(store, data_dir)
        assert store.volume == 0.4

    def test_volume_is_clamped(self):
        store = PlayerStore()
        rehydrate(store, {"volume": 4})
        assert store.volume == 1.0


class TestBindPersistence:
    """Test automatic saving on change."""

    def test_loads_then_saves_on_preference_change(self, data_dir):
        save_record(STORAGE_NAME, {"volume": 0.3, "isShuffled": True}, data_dir)
        store = PlayerStore()

        bind_persistence(store, data_dir)
        assert store.volume == 0.3
        assert store.is_shuffled is True

        store.set_volume(0.9)
        assert _read_saved(data_dir)["volume"] == 0.9

    def test_saves_history_on_play(self, data_dir, tracks):
        store = PlayerStore()
        bind_persistence(store, data_dir)
        store.play_track(tracks[0], tracks)
        assert _read_saved(data_dir)["history"][0]["id"] == "A"

    def test_transient_changes_do_not_write(self, data_dir, tracks):
        store = PlayerStore()
        bind_persistence(store, data_dir)
        store.report_progress(5.0)
        store.pause()
        assert not get_storage_path(STORAGE_NAME, data_dir).exists()

    def test_unsubscribe_stops_saving(self, data_dir):
        store = PlayerStore()
        unbind = bind_persistence(store, data_dir)
        store.set_volume(0.2)
        unbind()
        store.set_volume(0.7)
        assert _read_saved(data_dir)["volume"] == 0.2

    def test_history_above_default_limit_survives_restart(self, data_dir, make_track):
        store = PlayerStore(history_limit=150)
        bind_persistence(store, data_dir)
        for i in range(150):
            store.play_track(make_track(f"T{i}"))
        assert len(store.history) == 150

        reloaded = PlayerStore(history_limit=150)
        bind_persistence(reloaded, data_dir)
        assert len(reloaded.history) == 150
        assert reloaded.history[0].track.id == "T149"

    def test_smaller_limit_truncates_on_load(self, data_dir, make_track):
        store = PlayerStore()
        bind_persistence(store, data_dir)
        for i in range(20):
            store.play_track(make_track(f"T{i}"))

        reloaded = PlayerStore(history_limit=5)
        bind_persistence(reloaded, data_dir)
        assert [e.track.id for e in reloaded.history] == ["T19", "T18", "T17", "T16", "T15"]
