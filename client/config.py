"""Client configuration read from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base URL of the Bug Tracker API (no trailing slash)
BUGTRACKER_API_URL = os.environ.get("BUGTRACKER_API_URL", "http://localhost:8000").rstrip("/")

# JSON file standing in for browser localStorage
BUGTRACKER_SESSION_FILE = os.environ.get(
    "BUGTRACKER_SESSION_FILE",
    str(Path.home() / ".bugtracker" / "session.json"),
)

REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "30"))
