SECRET_KEY = "test-secret"

CHECKIN_CONFIG = {
    "token_secret": "test-checkin-secret",
    "base_url": "https://example.com",
}

DEBUG = False
TESTING = True

SEED_DEMO_DATA = False
