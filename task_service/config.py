# task_service/config.py
"""Environment-driven settings for the task service."""

import os
from pathlib import Path
from urllib.parse import quote_plus

SQLITE_PATH = Path(__file__).parent / "tasks.db"

DB_HOST = os.getenv("DB_HOST", "")
DB_PORT = int(os.getenv("DB_PORT", "3306"))
DB_USER = os.getenv("DB_USER", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]


def database_url() -> str:
    """Build the SQLAlchemy URL.

    ``DATABASE_URL`` wins when set. A configured ``DB_HOST`` selects MySQL
    through PyMySQL; otherwise a SQLite file next to the package is used.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    if DB_HOST:
        auth = quote_plus(DB_USER)
        if DB_PASSWORD:
            auth += ":" + quote_plus(DB_PASSWORD)
        return f"mysql+pymysql://{auth}@{DB_HOST}:{DB_PORT}/{DB_NAME}"

    return f"sqlite:///{SQLITE_PATH}"
