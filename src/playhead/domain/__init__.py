"""Domain layer: library models, playback, history, resume and stats."""
