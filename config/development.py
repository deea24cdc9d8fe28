import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

CHECKIN_CONFIG = {
    "token_secret": os.getenv("CHECKIN_TOKEN_SECRET", "dev-checkin-secret"),
    "base_url": os.getenv("PUBLIC_BASE_URL", "http://localhost:5000"),
    "validity_window_ms": int(os.getenv("VALIDITY_WINDOW_MS", str(15 * 60 * 1000))),
    "late_threshold_min": int(os.getenv("LATE_THRESHOLD_MIN", "10")),
    "absent_threshold_min": int(os.getenv("ABSENT_THRESHOLD_MIN", "15")),
    "admissible_before_min": int(os.getenv("ADMISSIBLE_BEFORE_MIN", "30")),
    "admissible_default_duration_min": int(os.getenv("ADMISSIBLE_DEFAULT_DURATION_MIN", "120")),
    "eligibility_threshold_pct": int(os.getenv("ELIGIBILITY_THRESHOLD_PCT", "50")),
    "refresh_threshold_seconds": int(os.getenv("REFRESH_THRESHOLD_SECONDS", "60")),
    "default_deposit_amount": int(os.getenv("DEFAULT_DEPOSIT_AMOUNT", "50000")),
}

DEBUG = True

# Load a demo book club into the in-memory store on startup
SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "1")))
