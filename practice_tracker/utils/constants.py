"""
Constants for the Practice Efficiency Tracker application.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Practice Efficiency Tracker"

# Tick intervals (milliseconds)
TIMER_TICK_MS = 100
WASTE_TICK_MS = 100

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_LOG_LEVEL = "INFO"

# Environment variables read by the web entry point
ENV_HOST = "PRACTICE_TRACKER_HOST"
ENV_PORT = "PRACTICE_TRACKER_PORT"
ENV_LOG_LEVEL = "PRACTICE_TRACKER_LOG_LEVEL"

# Action template cloned into every drill: (id, kind, enabled)
ACTION_TEMPLATE = [
    ("explanation", "timer", True),
    ("demonstration", "timer", True),
    ("feedbackteam", "timer", True),
    ("timemoving", "timer", True),
    ("repetition", "counter", True),
    ("feedbackplayers", "counter", True),
    ("shots", "counter", True),
    ("passes", "counter", True),
]

# Drill categories offered by the setup form
DRILL_TAGS = [
    "station",
    "drill",
    "technique",
    "tactic",
    "smallareagame",
    "skating",
    "passing",
    "shot",
    "puckhandling",
    "battlechecking",
]

# Pseudo action id used for waste time in reports
WASTE_TIME_ACTION_ID = "wasteTime"

ACTION_LABELS = {
    "explanation": "Explanation",
    "demonstration": "Demonstration",
    "feedbackteam": "Feedback (Team)",
    "changesideone": "Change Side #1",
    "changesidetwo": "Change Side #2",
    "timemoving": "Time moving",
    "repetition": "Repetition (stationary exercise)",
    "feedbackplayers": "Feedback (Player Received)",
    "shots": "Shots",
    "passes": "Passes",
    WASTE_TIME_ACTION_ID: "Waste Time",
}

TAG_LABELS = {
    "station": "Station",
    "drill": "Drill",
    "technique": "Technique",
    "tactic": "Tactic",
    "smallareagame": "SmallAreaGame",
    "skating": "Skating",
    "passing": "Passing",
    "shot": "Shot",
    "puckhandling": "Puckhandling",
    "battlechecking": "Battle | Checking",
}

# Chart colours per action (consumed by the report/chart layer)
ACTION_COLORS = {
    "explanation": "#0088FE",
    "demonstration": "#00C49F",
    "feedbackteam": "#FFBB28",
    "changesideone": "#FF8042",
    "changesidetwo": "#FF6666",
    "timemoving": "#A28BFE",
    WASTE_TIME_ACTION_ID: "#808080",
    "repetition": "#E91E63",
    "feedbackplayers": "#9C27B0",
    "shots": "#F44336",
    "passes": "#4CAF50",
}
DEFAULT_ACTION_COLOR = "#999999"


def action_label(action_id: str) -> str:
    """Return the display label for an action id, falling back to the id."""
    return ACTION_LABELS.get(action_id, action_id)


def action_color(action_id: str) -> str:
    """Return the chart colour for an action id."""
    return ACTION_COLORS.get(action_id, DEFAULT_ACTION_COLOR)
