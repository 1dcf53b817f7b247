"""
Constants for Track Playback

This module defines the timing, speed and labelling constants used throughout
the playback system, plus a small demo track used by the API and CLI.
"""

# Timer cadence of a running clock (seconds between advancement steps)
TICK_INTERVAL_S = 1.0 / 60.0

# Speed multiplier bounds; slow/quick divide or multiply by SPEED_FACTOR
DEFAULT_SPEED = 1.0
SPEED_FACTOR = 2.0
MIN_SPEED = 1.0 / 64.0
MAX_SPEED = 1024.0

# Labels attached to synthesized points
ACCURACY_LABEL = "Accuracy:"
KILOMETER_THRESHOLD_M = 1000.0

# Sample track served by app.py and replay_track.py
DEMO_TRACK = [
    {"time": 0.0, "lat": 40.4406, "lng": -79.9959, "radius": 12.0, "ts": "start"},
    {"time": 4.0, "lat": 40.4411, "lng": -79.9948, "radius": 8.0},
    {"time": 9.0, "lat": 40.4420, "lng": -79.9941, "radius": 15.0},
    {"time": 12.0, "lat": 40.4420, "lng": -79.9941, "radius": 15.0},
    {"time": 18.0, "lat": 40.4431, "lng": -79.9952, "radius": 1500.0},
    {"time": 25.0, "lat": 40.4425, "lng": -79.9970, "radius": 20.0, "ts": "finish"},
]
