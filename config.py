import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _int_env(name, default):
    try:
        value = int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _level_env(name, default):
    value = os.getenv(name, default).strip().upper()
    return value if value in LOG_LEVELS else default


HOST = os.getenv("HOST", "0.0.0.0")
PORT = _int_env("PORT", 3000)
DEBUG = os.getenv("FLASK_DEBUG", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = _level_env("LOG_LEVEL", "INFO")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()] or ["*"]

MAX_FORMATS = _int_env("MAX_FORMATS", 5)
DESCRIPTION_LENGTH = _int_env("DESCRIPTION_LENGTH", 200)
DEFAULT_AUDIO_QUALITY = _int_env("DEFAULT_AUDIO_QUALITY", 128)

CHUNK_SIZE = _int_env("STREAM_CHUNK_SIZE", 256 * 1024)
STREAM_TIMEOUT = _int_env("STREAM_TIMEOUT", 30)

YTDL_PROXY = os.getenv("YTDL_PROXY") or None
YTDL_COOKIEFILE = os.getenv("YTDL_COOKIEFILE") or None
