import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name):
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return None
    return raw in {"1", "true", "yes", "on"}


class Config:
    MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017").strip()
    MONGODB_DB = os.environ.get("MONGODB_DB", "movie_reviews").strip() or "movie_reviews"
    MONGODB_TIMEOUT_MS = int(os.environ.get("MONGODB_TIMEOUT_MS", "5000"))
    # None means "follow app.debug"
    ENABLE_SEED = _env_flag("ENABLE_SEED")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
