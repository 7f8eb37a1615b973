import os


def _int_env(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


DB_TIMEOUT_SECONDS = _int_env("DB_TIMEOUT_SECONDS", 10)


class Config:
    raw_db_url = os.getenv("DATABASE_URL")

    if raw_db_url:
        if raw_db_url.startswith("postgres://"):
            raw_db_url = raw_db_url.replace("postgres://", "postgresql://", 1)
        SQLALCHEMY_DATABASE_URI = raw_db_url
        SQLALCHEMY_ENGINE_OPTIONS = {
            "pool_pre_ping": True,
            "pool_timeout": DB_TIMEOUT_SECONDS,
            "connect_args": {"connect_timeout": DB_TIMEOUT_SECONDS},
        }
    else:
        SQLALCHEMY_DATABASE_URI = "sqlite:///contest.db"
        # sqlite3 busy timeout, so a locked file never blocks forever
        SQLALCHEMY_ENGINE_OPTIONS = {
            "connect_args": {"timeout": DB_TIMEOUT_SECONDS},
        }

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-dev-secret")

    # Audit trail keeps only the newest N entries
    LOG_LIMIT = _int_env("LOG_LIMIT", 1000)

    CONTEST_TIMEZONE = os.getenv("CONTEST_TIMEZONE", "Asia/Tokyo")


# --- Contest defaults (used when the settings row is first created) ---

DEFAULT_CONTEST_NAME = os.getenv("DEFAULT_CONTEST_NAME", "BMX Flatland Contest")
DEFAULT_AUDIENCE_WEIGHT = float(os.getenv("DEFAULT_AUDIENCE_WEIGHT", "2"))
DEFAULT_AUDIENCE_MIN_SCORE = _int_env("DEFAULT_AUDIENCE_MIN_SCORE", 1)
DEFAULT_AUDIENCE_MAX_SCORE = _int_env("DEFAULT_AUDIENCE_MAX_SCORE", 5)
DEFAULT_VOTING_DEADLINE_SECONDS = _int_env("DEFAULT_VOTING_DEADLINE_SECONDS", 30)
DEFAULT_ALLOW_VOTE_MODIFICATION = os.getenv("DEFAULT_ALLOW_VOTE_MODIFICATION", "1") not in ("0", "false", "False")
DEFAULT_MODIFICATION_WINDOW_SECONDS = _int_env("DEFAULT_MODIFICATION_WINDOW_SECONDS", 10)

DEFAULT_EVALUATION_ITEMS = [
    {"id": "make_rate", "name": "Make rate", "weight": 5, "min_score": 1, "max_score": 5, "order": 1, "enabled": True},
    {"id": "difficulty", "name": "Trick difficulty", "weight": 3, "min_score": 1, "max_score": 5, "order": 2, "enabled": True},
    {"id": "aggressiveness", "name": "Aggressiveness", "weight": 2, "min_score": 1, "max_score": 5, "order": 3, "enabled": True},
    {"id": "stability", "name": "Stability", "weight": 3, "min_score": 1, "max_score": 5, "order": 4, "enabled": True},
    {"id": "impact", "name": "Impact", "weight": 3, "min_score": 1, "max_score": 5, "order": 5, "enabled": True},
    {"id": "composition", "name": "Overall composition", "weight": 4, "min_score": 1, "max_score": 5, "order": 6, "enabled": True},
]
