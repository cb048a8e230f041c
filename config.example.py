# config.example.py

"""
Documentation-only module (safe to commit).

Settings are read from DAYGRID_* environment variables, optionally through a
local .env file (gitignored). Invalid numeric values fall back to the default.
"""

ENV_VARS = {
    # App / logging
    "DAYGRID_APP_NAME": "Name used in log lines (default: daygrid).",
    "DAYGRID_LOG_LEVEL": "Logging level (default: INFO).",
    "DAYGRID_DATA_DIR": "Directory for the log file (default: .local/daygrid).",
    # Day boundaries
    "DAYGRID_TZ": "Viewer time zone: local, UTC, +HH:MM or an IANA name (default: local).",
    # Grid geometry
    "DAYGRID_HOUR_HEIGHT_PX": "Pixels per hour row (default: 60).",
    "DAYGRID_MIN_EVENT_HEIGHT_PX": "Minimum rendered block height (default: 20).",
    # Mutations
    "DAYGRID_MIN_DURATION_MIN": "Shortest schedule entry a resize may produce (default: 15).",
    "DAYGRID_TIME_RESOLUTION_MIN": "Rounding step for dropped/resized times (default: 1).",
    # Deadline urgency
    "DAYGRID_URGENCY_HIGH_HOURS": "Due within this many hours is high urgency (default: 24).",
    "DAYGRID_URGENCY_MEDIUM_HOURS": "Due within this many hours is medium urgency (default: 72).",
    # Task store
    "DAYGRID_STORE_TIMEOUT_SECONDS": "Timeout for every task store call (default: 10).",
}
