"""Tests for stats API endpoints."""

from datetime import datetime, timedelta, timezone


class TestStatsEndpoints:
    def test_summary_counts_plays(self, client, queue_payload):
        client.post("/api/player/play", json={"track": queue_payload[0], "queue": queue_payload})
        client.post("/api/player/next")

        summary = client.get("/api/stats/summary").json()

        assert summary["totalPlays"] == 2
        assert summary["uniqueTracks"] == 2
        assert summary["uniqueArtists"] == 1
        assert summary["totalHours"] == 0

    def test_listening_time_from_progress(self, client, queue_payload):
        client.post("/api/player/play", json={"track": queue_payload[0], "queue": queue_payload})
        for second in range(1, 4):
            client.post(
                "/api/player/progress",
                json={"playedSeconds": float(second), "duration": 100.0},
            )

        summary = client.get("/api/stats/summary").json()
        days = client.get("/api/stats/listening-time", params={"days": 3}).json()

        assert summary["totalListeningTime"] == 3.0
        assert summary["currentStreak"] == 1
        assert len(days) == 3
        assert days[-1]["seconds"] == 3.0
        assert {"date", "displayDate", "seconds", "minutes"} <= set(days[0])

    def test_top_lists(self, client, service, track_payload):
        for track_id, genre in [("A", "Rock"), ("B", "Jazz"), ("B", "Jazz")]:
            client.post("/api/player/play", json={"track": track_payload(track_id, genre=genre)})

        top_tracks = client.get("/api/stats/top-tracks").json()
        top_artists = client.get("/api/stats/top-artists").json()
        top_genres = client.get("/api/stats/top-genres", params={"limit": 1}).json()

        assert [t["id"] for t in top_tracks] == ["B", "A"]
        assert top_tracks[0]["playCount"] == 2
        assert top_tracks[0]["lastPlayed"] is not None
        assert top_artists == [
            {
                "name": "Test Artist",
                "playCount": 3,
                "lastPlayed": top_artists[0]["lastPlayed"],
            }
        ]
        assert [g["name"] for g in top_genres] == ["Jazz"]

    def test_recent_activity(self, client, service, track_payload):
        now = datetime.now(timezone.utc)
        client.post("/api/player/play", json={"track": track_payload("A")})
        service.stats.track_play_counts["OLD"] = {
            "count": 1,
            "lastPlayed": (now - timedelta(days=3)).isoformat(),
            "trackInfo": {"id": "OLD"},
        }

        activity = client.get("/api/stats/recent").json()

        assert activity == {"playsToday": 1, "playsThisWeek": 2}

    def test_clear_stats(self, client, queue_payload):
        client.post("/api/player/play", json={"track": queue_payload[0], "queue": queue_payload})
        assert client.delete("/api/stats").json() == {"cleared": True}
        assert client.get("/api/stats/summary").json()["totalPlays"] == 0

    def test_invalid_days_rejected(self, client):
        assert client.get("/api/stats/listening-time", params={"days": 0}).status_code == 422
