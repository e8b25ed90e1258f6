"""Tests for the play history log."""

from datetime import datetime, timedelta, timezone

from playhead.domain.history.log import (
    HISTORY_LIMIT,
    HistoryEntry,
    add_to_history,
    history_from_records,
    history_to_records,
)

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestAddToHistory:
    """Test dedup, ordering and the size cap."""

    def test_prepends_newest(self, tracks):
        history = add_to_history([], tracks[0], now=T0)
        history = add_to_history(history, tracks[1], now=T0 + timedelta(seconds=1))
        assert [e.track.id for e in history] == ["B", "A"]

    def test_same_track_twice_keeps_one_entry(self, tracks):
        history = add_to_history([], tracks[0], now=T0)
        history = add_to_history(history, tracks[0], now=T0 + timedelta(minutes=5))
        assert len(history) == 1
        assert history[0].track == tracks[0]
        assert history[0].played_at == T0 + timedelta(minutes=5)

    def test_replay_moves_entry_to_front(self, tracks):
        history = []
        for i, track in enumerate(tracks):
            history = add_to_history(history, track, now=T0 + timedelta(seconds=i))
        history = add_to_history(history, tracks[0], now=T0 + timedelta(seconds=10))
        assert [e.track.id for e in history] == ["A", "C", "B"]

    def test_dedup_uses_id_and_latest_fields(self, make_track):
        history = add_to_history([], make_track("A", title="Old"), now=T0)
        history = add_to_history(history, make_track("A", title="New"), now=T0)
        assert len(history) == 1
        assert history[0].track.title == "New"

    def test_cap_keeps_most_recent_hundred(self, make_track):
        history = []
        for i in range(150):
            history = add_to_history(history, make_track(str(i)), now=T0 + timedelta(seconds=i))
        assert len(history) == HISTORY_LIMIT
        assert history[0].track.id == "149"
        assert history[-1].track.id == "50"

    def test_does_not_mutate_input(self, tracks):
        original = add_to_history([], tracks[0], now=T0)
        add_to_history(original, tracks[1], now=T0)
        assert [e.track.id for e in original] == ["A"]

    def test_default_timestamp_is_utc(self, tracks):
        history = add_to_history([], tracks[0])
        assert history[0].played_at.tzinfo is not None


class TestHistoryRecords:
    """Test the persisted record form."""

    def test_entry_to_dict_flattens_track(self, make_track):
        entry = HistoryEntry(track=make_track("A", duration=12.5), played_at=T0)
        data = entry.to_dict()
        assert data["id"] == "A"
        assert data["fileUrl"] == "https://media.example/A.mp3"
        assert data["duration"] == 12.5
        assert data["playedAt"] == T0.isoformat()

    def test_records_round_trip(self, tracks):
        history = []
        for i, track in enumerate(tracks):
            history = add_to_history(history, track, now=T0 + timedelta(seconds=i))
        assert history_from_records(history_to_records(history)) == history

    def test_from_records_skips_malformed_and_duplicates(self):
        records = [
            {"id": "A", "title": "First", "playedAt": "2024-03-01T12:00:00Z"},
            {"title": "missing id"},
            None,
            {"id": "A", "title": "Older duplicate"},
            {"id": "B", "title": "Second", "playedAt": "not a date"},
        ]
        history = history_from_records(records)
        assert [e.track.id for e in history] == ["A", "B"]
        assert history[0].track.title == "First"
        assert history[0].played_at == T0
        assert history[1].played_at.tzinfo is not None

    def test_from_records_applies_limit(self):
        records = [{"id": str(i), "title": str(i)} for i in range(10)]
        assert len(history_from_records(records, limit=4)) == 4
