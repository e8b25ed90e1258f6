"""
Playhead - playback queue, history and resume state for a media streaming client
"""

__version__ = "0.1.0"
