"""Runtime configuration for the JobMatch backend and UI."""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str, default: str = "") -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


# Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_ENDPOINT = os.getenv(
    "GEMINI_API_ENDPOINT",
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
)
GEMINI_TIMEOUT_SECONDS = _env_float("GEMINI_TIMEOUT_SECONDS", 60.0)

# Capacity-error backoff (429 / 503)
GEMINI_MAX_RETRIES = int(os.getenv("GEMINI_MAX_RETRIES", "8"))
GEMINI_INITIAL_DELAY_SECONDS = _env_float("GEMINI_INITIAL_DELAY_SECONDS", 2.0)
GEMINI_BACKOFF_FACTOR = _env_float("GEMINI_BACKOFF_FACTOR", 1.5)
GEMINI_MAX_JITTER_SECONDS = _env_float("GEMINI_MAX_JITTER_SECONDS", 2.0)
GEMINI_MAX_DELAY_SECONDS = _env_float("GEMINI_MAX_DELAY_SECONDS", 30.0)

# Malformed-response re-attempts
GEMINI_MAX_ATTEMPTS = int(os.getenv("GEMINI_MAX_ATTEMPTS", "3"))
GEMINI_RETRY_PAUSE_SECONDS = _env_float("GEMINI_RETRY_PAUSE_SECONDS", 2.0)

# Pacing between dependent calls
GEMINI_CALL_SPACING_SECONDS = _env_float("GEMINI_CALL_SPACING_SECONDS", 3.0)
SCORE_PAUSE_SECONDS = _env_float("SCORE_PAUSE_SECONDS", 10.0)
SCORE_RATE_LIMIT_PAUSE_SECONDS = _env_float("SCORE_RATE_LIMIT_PAUSE_SECONDS", 30.0)

# Blob storage
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))

# Recognition anchors for the heuristic extractor
RESUME_KNOWN_NAMES = _env_list("RESUME_KNOWN_NAMES")
RESUME_KNOWN_EMPLOYERS = _env_list("RESUME_KNOWN_EMPLOYERS")
RESUME_DURATION_YEARS = _env_list("RESUME_DURATION_YEARS", "2024")

# UI
BACKEND_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
