from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# DB SQLite su file nella root del progetto (accanto a streamlit_app.py)
DB_PATH = Path(__file__).resolve().parents[1] / "sale_riunioni.sqlite"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")
# query SQL nel log (SQLAlchemy echo)
SQL_ECHO = os.getenv("SQL_ECHO", "0").lower() in ("1", "true", "si", "yes")

# Indirizzo dell'API usato da Streamlit e dalla CLI
API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

# Secondi tra due commenti keep-alive sullo stream realtime
REALTIME_KEEPALIVE = float(os.getenv("REALTIME_KEEPALIVE", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configura_logging(level: str | None = None) -> None:
    """Configura il logging standard una sola volta per processo."""
    numeric_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
